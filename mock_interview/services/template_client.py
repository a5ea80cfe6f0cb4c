from __future__ import annotations

import re
from typing import Dict, List, Tuple

from mock_interview.domain.models import AnswerAnalysis, ChatTurn
from mock_interview.domain.roles import InterviewRole
from mock_interview.services.interviewer import InterviewClient


# Per-role question banks, asked in order and then cycled.
QUESTION_BANK: Dict[InterviewRole, List[str]] = {
    InterviewRole.software_engineer: [
        "Tell me about yourself and the kind of systems you have worked on.",
        "Describe a difficult bug you tracked down. How did you approach it?",
        "How would you choose between a list and a hash map for a lookup-heavy workload?",
        "Tell me about a time you disagreed with a teammate on a technical decision.",
        "Sketch how you would design a URL shortener that handles heavy read traffic.",
    ],
    InterviewRole.product_manager: [
        "Tell me about yourself and a product you are proud of.",
        "How do you decide what goes into the next release when everything feels urgent?",
        "Which metrics would you track for a new onboarding flow, and why?",
        "Describe a time you had to say no to an important stakeholder.",
        "How would you improve a product you use every day?",
    ],
    InterviewRole.retail_associate: [
        "Tell me about yourself and any customer-facing work you have done.",
        "A customer is upset because an advertised item is out of stock. What do you do?",
        "How do you stay productive during a very busy shift?",
        "Tell me about a time you helped a teammate on the floor.",
        "How would you recommend an add-on product without being pushy?",
    ],
    InterviewRole.customer_service: [
        "Tell me about yourself and your experience supporting customers.",
        "Walk me through how you handle a caller who is angry before you can speak.",
        "Describe a time you solved a problem that was outside your usual process.",
        "How do you explain a policy the customer does not like?",
        "When do you escalate an issue, and how?",
    ],
    InterviewRole.sales: [
        "Tell me about yourself and your sales track record.",
        "A prospect says your price is too high. How do you respond?",
        "How do you manage and prioritize your pipeline each week?",
        "Tell me about the toughest deal you closed.",
        "What do you do when you are behind target halfway through the quarter?",
    ],
    InterviewRole.healthcare: [
        "Tell me about yourself and your experience in patient care.",
        "Describe how you stay calm and effective in an emergency.",
        "A patient refuses a recommended treatment. How do you handle it?",
        "Tell me about a time you worked closely with a clinical team under pressure.",
        "How do you protect patient privacy in a busy ward?",
    ],
    InterviewRole.teaching: [
        "Tell me about yourself and why you want to teach.",
        "How do you set up classroom routines at the start of the year?",
        "Describe how you adapt a lesson for students at very different levels.",
        "Tell me about a time you resolved a conflict between students.",
        "How do you know whether a lesson actually worked?",
    ],
}

EXAMPLE_MARKERS = (
    "for example", "for instance", "when i", "in my last", "at my previous",
    "at my last", "once i", "i remember", "situation",
)

STOPWORDS = {
    "about", "would", "their", "there", "which", "where", "tell", "describe",
    "yourself", "what", "your", "with", "that", "this", "have", "does", "when",
}


def _keywords(text: str) -> set:
    words = re.findall(r"[a-zA-Z]+", text.lower())
    return {w for w in words if len(w) > 3 and w not in STOPWORDS}


def score_answer(answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
    """Heuristic critique: length, concrete example, numbers, relevance."""
    strengths: List[str] = []
    improvements: List[str] = []
    suggestions: List[str] = []

    text = answer.lower()
    word_count = len(answer.split())

    if word_count >= 60:
        strengths.append("Detailed, well-developed answer")
    elif word_count < 20:
        improvements.append("Answer is too brief to show depth")
        suggestions.append("Expand your answers to a few full sentences")

    if any(marker in text for marker in EXAMPLE_MARKERS):
        strengths.append("Grounded the answer in a concrete example")
    else:
        improvements.append("Could provide more specific examples")
        suggestions.append("Try using the STAR method (Situation, Task, Action, Result)")

    if re.search(r"\d", answer):
        strengths.append("Quantified the outcome")
    else:
        suggestions.append("Quantify results with numbers where you can")

    question_terms = _keywords(question)
    if not question_terms or question_terms & _keywords(answer):
        strengths.append("Stayed relevant to the question")
    else:
        improvements.append("Did not clearly address the question")
        suggestions.append(f"Connect your answer back to core {role.label} skills")

    return AnswerAnalysis(
        strengths=strengths,
        improvements=improvements,
        suggestions=suggestions,
        overallScore=max(1, min(5, 1 + len(strengths))),
    )


def _follow_up(last_answer: str) -> Tuple[str, str]:
    """Acknowledgement and optional probe for the previous answer."""
    if len(last_answer.split()) < 20:
        return "Thanks.", "Could you expand on that with a concrete example? Then let's continue."
    return "Thanks for the detailed answer.", "Let's move on."


class TemplateInterviewClient(InterviewClient):
    """Offline interviewer: fixed question banks and heuristic scoring."""

    name = "template"

    async def initial_question(self, role: InterviewRole) -> str:
        first = QUESTION_BANK[role][0]
        return f"Hi, welcome to your {role.label} practice interview. {first}"

    async def respond(self, role: InterviewRole, history: List[ChatTurn]) -> str:
        answers = [turn.content for turn in history if turn.role == "user"]
        bank = QUESTION_BANK[role]
        next_question = bank[len(answers) % len(bank)]
        thanks, probe = _follow_up(answers[-1] if answers else "")
        return f"{thanks} {probe} {next_question}"

    async def analyze(self, answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
        return score_answer(answer, question, role)
