"""
One-shot resume rewrite for a job category, plus industry keyword lists.
"""
from typing import Any

from pydantic import BaseModel

from talencor.services.llm.base import (
    LLMServiceError,
    as_str_list,
    chat_completion_json,
    get_openai_client,
)
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

ENHANCE_SYSTEM_PROMPT = """You are an expert resume writer and career strategist.
You know how applicant tracking systems parse resumes and what hiring managers scan for.
Enhance the truth, never fabricate. Every line must demonstrate value and impact.
Output a single JSON object with:
- "enhancedResume": string, the complete transformed resume
- "improvements": array of strings, specific improvements made with before/after context
- "suggestions": array of strings, actionable next steps for the candidate"""

KEYWORDS_SYSTEM_PROMPT = """You are an industry keyword specialist and labor market analyst.
Recommend resume keywords that improve ATS matching and visibility.
Output a single JSON object with:
- "keywords": array of objects, each with "term", "category" (technical|tool|methodology|certification|soft_skill|trending|leadership), "priority" (critical|high|medium), "variations" (array of strings), "context" (string), "trend" (rising|stable|declining)
- "industry_insights": string
- "top_combinations": array of strings
- "avoid_keywords": array of strings"""


class EnhancementOptions(BaseModel):
    formatting: bool = True
    keywords: bool = True
    achievements: bool = True
    skills: bool = True
    summary: bool = True


def build_enhancement_tasks(job_category: str, options: EnhancementOptions) -> list[str]:
    tasks = []
    if options.formatting:
        tasks.append("Professional formatting optimized for ATS systems")
    if options.keywords:
        tasks.append(f"Industry-specific keywords for {job_category} roles")
    if options.achievements:
        tasks.append("Transform responsibilities into quantifiable achievements with metrics")
    if options.skills:
        tasks.append("Highlight relevant technical and soft skills")
    if options.summary:
        tasks.append("Create a compelling professional summary")
    return tasks


class ResumeEnhancer:
    """Rewrites whole resumes and suggests keywords per industry."""

    async def enhance_resume(
        self,
        resume_text: str,
        job_category: str,
        options: EnhancementOptions | None = None,
    ) -> dict[str, Any]:
        """
        Rewrite the resume for the job category.
        Returns enhanced_resume (the input text when the model omits it),
        suggestions and improvements.
        """
        options = options or EnhancementOptions()
        tasks = build_enhancement_tasks(job_category, options)
        objectives = "\n".join(f"{i}. {task}" for i, task in enumerate(tasks, start=1))
        user_content = f"""Transform this resume into a career marketing document that positions the candidate for {job_category} roles.

ENHANCEMENT OBJECTIVES:
{objectives or "General polish"}

TARGET INDUSTRY: {job_category}

ORIGINAL RESUME:
{resume_text[:12000]}

Requirements:
- Clear section hierarchy, most relevant information first, ATS-friendly plain layout
- Convert duties to quantified achievements, start bullets with strong action verbs
- Incorporate {job_category} terminology naturally, keep tense and voice consistent
- Stay authentic to the candidate"""
        try:
            client = get_openai_client()
            data = await chat_completion_json(
                client,
                system_prompt=ENHANCE_SYSTEM_PROMPT,
                user_content=user_content,
                max_tokens=2000,
                temperature=0.7,
            )
        except LLMServiceError:
            raise
        except Exception as e:
            logger.exception("Resume enhancement failed")
            raise LLMServiceError(str(e)) from e

        enhanced = data.get("enhancedResume") or data.get("enhanced_resume")
        return {
            "enhanced_resume": str(enhanced) if enhanced else resume_text,
            "suggestions": as_str_list(data.get("suggestions")),
            "improvements": as_str_list(data.get("improvements")),
        }

    async def generate_industry_keywords(self, industry: str) -> list[Any]:
        """Keyword entries for an industry. Empty list when the call fails."""
        user_content = (
            f"Provide a strategic keyword analysis for {industry} professionals that will "
            f"maximize their resume's ATS performance. Focus on 20-25 high-impact keywords, "
            f"ranked by importance, with variations and usage context."
        )
        try:
            client = get_openai_client()
            data = await chat_completion_json(
                client,
                system_prompt=KEYWORDS_SYSTEM_PROMPT,
                user_content=user_content,
                max_tokens=5000,
                temperature=0.5,
            )
        except Exception:
            logger.warning("Industry keywords unavailable", extra={"industry": industry[:50]})
            return []
        keywords = data.get("keywords")
        if not isinstance(keywords, list):
            return []
        return [k for k in keywords if isinstance(k, (dict, str))]
