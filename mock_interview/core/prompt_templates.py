"""
Prompt templates for the interviewer and the answer analyst.

Role personas live on `InterviewRole.script`; this module holds the
prompts shared by every role.
"""
from mock_interview.domain.roles import InterviewRole


OPENING_INSTRUCTION = "Start the interview with a warm greeting and your first question."

FALLBACK_OPENING = (
    "Welcome! Let's begin with: Tell me about yourself and why you're "
    "interested in this role."
)

FALLBACK_REPLY = "I apologize, but I need you to repeat that."

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert interview coach providing constructive feedback. "
    "Always respond with valid JSON."
)


def build_system_prompt(role: InterviewRole) -> str:
    """System prompt for interviewer turns."""
    return role.script


def build_analysis_prompt(answer: str, question: str, role: InterviewRole) -> str:
    """Prompt asking for a JSON critique of one answer."""
    return f"""As an expert interview coach, analyze this interview response:

Question: {question or "(no question asked yet)"}
Role: {role.label}
Candidate's Response: {answer}

Provide constructive feedback in JSON format with:
- strengths: array of 2-3 specific strengths
- improvements: array of 2-3 areas for improvement
- suggestions: array of 2-3 actionable suggestions
- overallScore: rating from 1-5

Focus on communication clarity, relevance, depth of answer, and role-specific competencies."""
