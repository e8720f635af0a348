"""
Mock-interview simulator: one question at a time, feedback on answers, prep tips.
"""
from typing import Any

from talencor.services.llm.base import (
    LLMServiceError,
    as_str_list,
    chat_completion_json,
    get_openai_client,
)
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

QUESTION_SYSTEM_PROMPT = """You are a professional interviewer with deep expertise in conducting interviews across various industries.
Generate thoughtful, relevant interview questions that help assess candidates effectively.
Output a single JSON object with:
- "question": string, a realistic interview question
- "tips": array of 3 strings, tips for answering this question effectively
- "expectedElements": array of 3-4 strings, key elements a strong answer should include"""

EVALUATION_SYSTEM_PROMPT = """You are a constructive interview coach providing helpful feedback to job seekers.
Be encouraging while offering specific, actionable advice for improvement.
Output a single JSON object with:
- "score": number from 0 to 100
- "strengths": array of strings
- "improvements": array of strings, areas for improvement
- "suggestions": array of strings, specific suggestions
- "overallFeedback": string, a paragraph of overall feedback"""

TIPS_SYSTEM_PROMPT = """You are a career coach providing interview preparation tips.
Output a single JSON object with "tips": array of strings."""

EXPERIENCE_LEVEL_CONTEXT = {
    "entry": "entry-level position with 0-2 years of experience",
    "mid": "mid-level position with 3-5 years of experience",
    "senior": "senior-level position with 6+ years of experience",
    "executive": "executive or leadership position",
}

DEFAULT_QUESTION = "Tell me about yourself and your background."
DEFAULT_QUESTION_TIPS = ["Be concise", "Use specific examples", "Show enthusiasm"]
DEFAULT_EXPECTED_ELEMENTS = ["Relevant experience", "Key achievements", "Career goals"]

DEFAULT_SCORE = 70
DEFAULT_STRENGTHS = ["Clear communication"]
DEFAULT_IMPROVEMENTS = ["Add more specific examples"]
DEFAULT_SUGGESTIONS = ["Practice the STAR method"]
DEFAULT_OVERALL_FEEDBACK = "Good effort. Continue practicing to improve your responses."

DEFAULT_INTERVIEW_TIPS = [
    "Research the company thoroughly",
    "Prepare specific examples using the STAR method",
    "Ask thoughtful questions about the role",
    "Dress professionally and arrive early",
    "Follow up with a thank-you email",
]


def _clamp_score(value: Any) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return DEFAULT_SCORE
    # A zero score is treated like a missing one
    if score == 0:
        return DEFAULT_SCORE
    return max(0, min(100, score))


class InterviewSimulator:
    """Drives the interview practice tool."""

    async def generate_question(
        self,
        job_category: str,
        experience_level: str,
        question_number: int,
        previous_questions: list[str] | None = None,
    ) -> dict[str, Any]:
        """Returns {question, tips, expected_elements}; missing keys get defaults."""
        level_context = EXPERIENCE_LEVEL_CONTEXT.get(experience_level, "professional")
        previous = ""
        if previous_questions:
            previous = (
                "\n\nPrevious questions asked (avoid repeating similar questions):\n"
                + "\n".join(previous_questions)
            )
        user_content = f"""You are an expert interviewer for {job_category} roles. Generate a behavioral or technical interview question appropriate for a {level_context}.

This is question {question_number} of the interview.{previous}

Provide the question, 3 tips for answering it effectively and 3-4 key elements that a strong answer should include."""
        try:
            client = get_openai_client()
            data = await chat_completion_json(
                client,
                system_prompt=QUESTION_SYSTEM_PROMPT,
                user_content=user_content,
                max_tokens=500,
                temperature=0.8,
            )
        except LLMServiceError:
            raise
        except Exception as e:
            logger.exception("Interview question generation failed")
            raise LLMServiceError(str(e)) from e

        question = data.get("question")
        return {
            "question": str(question) if question else DEFAULT_QUESTION,
            "tips": as_str_list(data.get("tips"), DEFAULT_QUESTION_TIPS),
            "expected_elements": as_str_list(
                data.get("expectedElements") or data.get("expected_elements"),
                DEFAULT_EXPECTED_ELEMENTS,
            ),
        }

    async def evaluate_response(
        self,
        question: str,
        response: str,
        job_category: str,
        experience_level: str,
    ) -> dict[str, Any]:
        """Score a candidate answer. Score is clamped to 0-100."""
        user_content = f"""You are an expert interviewer evaluating a candidate's response for a {job_category} {experience_level} position.

Question asked: "{question}"

Candidate's response: "{response}"

Evaluate the response and provide constructive feedback. Consider:
- Relevance to the question
- Use of specific examples (STAR method)
- Communication clarity
- Demonstration of required skills
- Professional tone and structure"""
        try:
            client = get_openai_client()
            data = await chat_completion_json(
                client,
                system_prompt=EVALUATION_SYSTEM_PROMPT,
                user_content=user_content,
                max_tokens=800,
                temperature=0.7,
            )
        except LLMServiceError:
            raise
        except Exception as e:
            logger.exception("Interview evaluation failed")
            raise LLMServiceError(str(e)) from e

        overall = data.get("overallFeedback") or data.get("overall_feedback")
        return {
            "score": _clamp_score(data.get("score")),
            "strengths": as_str_list(data.get("strengths"), DEFAULT_STRENGTHS),
            "improvements": as_str_list(data.get("improvements"), DEFAULT_IMPROVEMENTS),
            "suggestions": as_str_list(data.get("suggestions"), DEFAULT_SUGGESTIONS),
            "overall_feedback": str(overall) if overall else DEFAULT_OVERALL_FEEDBACK,
        }

    async def generate_tips(self, job_category: str) -> list[str]:
        """Five prep tips. Defaults when the model omits them, empty list when the call fails."""
        try:
            client = get_openai_client()
            data = await chat_completion_json(
                client,
                system_prompt=TIPS_SYSTEM_PROMPT,
                user_content=f"Provide 5 essential interview tips specifically for {job_category} positions.",
                max_tokens=300,
                temperature=0.6,
            )
        except Exception:
            logger.warning("Interview tips unavailable", extra={"job_category": job_category[:50]})
            return []
        return as_str_list(data.get("tips"), DEFAULT_INTERVIEW_TIPS)
