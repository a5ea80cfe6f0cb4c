"""
Storage, interviewer clients and the session manager facade.
"""
