"""
Section-by-section resume analysis for the resume wizard.
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

ANALYZE_SYSTEM_PROMPT = """You are an expert resume analyst with 15+ years of experience in recruitment and career coaching.
Provide detailed, actionable feedback that helps job seekers improve their resumes for ATS compatibility and hiring manager appeal.
Output a single JSON object with:
- "overallScore": integer 1-100
- "sections": object keyed by section type (summary, experience, education, skills, achievements) present in the input, each with "score" (integer 1-100), "feedback" (string), "suggestions" (array of strings)
- "keywordOptimization": {"missing": [strings], "present": [strings], "suggestions": string}
- "atsOptimization": {"score": integer, "issues": [strings], "recommendations": [strings]}
- "industrySpecific": {"relevance": integer, "suggestions": [strings]}"""

ENHANCE_SECTION_SYSTEM_PROMPT = """You are an expert resume writer with deep knowledge of ATS systems, hiring practices, and industry-specific requirements.
Enhance content while maintaining authenticity and professional standards.
Output a single JSON object with:
- "enhanced": string, the improved content
- "improvements": array of strings, specific improvements made
- "reasoning": string, why the changes were made"""

KEYWORDS_SYSTEM_PROMPT = """You are an expert in ATS optimization and recruitment technology.
Suggest keywords that improve resume visibility and relevance.
Output a single JSON object with:
- "keywords": array of strings
- "explanation": string"""


def _int_or_none(value: Any) -> int | None:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError):
        return None


class ResumeAnalyzer:
    """LLM calls behind the resume wizard."""

    async def _call(self, system_prompt: str, user_content: str, what: str) -> dict[str, Any]:
        try:
            client = get_openai_client()
            return await chat_completion_json(
                client,
                system_prompt=system_prompt,
                user_content=user_content,
                max_tokens=2500,
                temperature=0.3,
            )
        except LLMServiceError:
            raise
        except Exception as e:
            logger.exception(f"Resume {what} failed")
            raise LLMServiceError(str(e)) from e

    async def analyze(
        self,
        sections: list[dict[str, str]],
        target_role: str | None = None,
        industry: str | None = None,
    ) -> dict[str, Any]:
        """
        Analyze sections given as [{"type", "content"}].
        Returns overall_score, per-section {score, feedback, suggestions} and the
        keyword/ATS/industry blocks as the model produced them.
        """
        body = "\n".join(f"\n{s['type'].upper()}:\n{s['content']}\n" for s in sections)
        user_content = f"""Analyze the following resume sections and provide detailed feedback.

Target Role: {target_role or "Not specified"}
Industry: {industry or "Not specified"}

Resume Sections:
{body}

Focus on content quality and impact, ATS compatibility, keyword optimization,
quantifiable achievements, professional language and industry relevance."""
        data = await self._call(ANALYZE_SYSTEM_PROMPT, user_content, "analysis")

        raw_sections = data.get("sections")
        if not isinstance(raw_sections, dict):
            raw_sections = {}
        section_results: dict[str, dict[str, Any]] = {}
        for section_type, item in raw_sections.items():
            if not isinstance(item, dict):
                continue
            section_results[str(section_type).lower()] = {
                "score": _int_or_none(item.get("score")),
                "feedback": str(item.get("feedback") or ""),
                "suggestions": as_str_list(item.get("suggestions")),
            }
        return {
            "overall_score": _int_or_none(data.get("overallScore") or data.get("overall_score")),
            "sections": section_results,
            "keyword_optimization": data.get("keywordOptimization") or {},
            "ats_optimization": data.get("atsOptimization") or {},
            "industry_specific": data.get("industrySpecific") or {},
        }

    async def enhance_section(
        self,
        content: str,
        section_type: str,
        target_role: str | None = None,
        industry: str | None = None,
    ) -> dict[str, Any]:
        """Returns {original, enhanced, improvements, reasoning}; enhanced falls back to the input."""
        user_content = f"""Enhance the following {section_type} section for better impact and ATS optimization.

Target Role: {target_role or "Not specified"}
Industry: {industry or "Not specified"}
Section Type: {section_type}

Original Content:
{content}

Requirements:
- Improve impact and readability
- Add relevant keywords for ATS optimization
- Use action verbs and quantifiable achievements
- Maintain authenticity and accuracy
- Optimize for {f"{target_role} role" if target_role else "general professional impact"}"""
        data = await self._call(ENHANCE_SECTION_SYSTEM_PROMPT, user_content, "section enhancement")
        enhanced = data.get("enhanced")
        return {
            "original": content,
            "enhanced": str(enhanced) if enhanced else content,
            "improvements": as_str_list(data.get("improvements")),
            "reasoning": str(data.get("reasoning") or ""),
        }

    async def suggest_keywords(
        self, target_role: str, industry: str, current_content: str
    ) -> dict[str, Any]:
        user_content = f"""Analyze the following resume content and suggest relevant keywords for a {target_role} position in the {industry} industry.

Current Resume Content:
{current_content[:12000]}

Suggest keywords that are relevant to the role and industry, ATS-friendly,
not already prominent in the content, and standard industry terminology."""
        data = await self._call(KEYWORDS_SYSTEM_PROMPT, user_content, "keyword suggestion")
        return {
            "keywords": as_str_list(data.get("keywords")),
            "explanation": str(data.get("explanation") or ""),
        }
