"""
AI career tools: resume enhancement, industry keywords and the interview simulator.
LLM failures surface as 503 via the LLMServiceError handler, except the keyword and
tips lookups which degrade to empty lists.
"""
from typing import Any, Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field, field_validator

from talencor.api.middleware.rate_limit import check_submit_rate_limit
from talencor.services.llm.interview_simulator import InterviewSimulator
from talencor.services.llm.resume_enhancer import EnhancementOptions, ResumeEnhancer
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string

logger = get_logger(__name__)
router = APIRouter()

ExperienceLevel = Literal["entry", "mid", "senior", "executive"]


class EnhanceResumeRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=50000)
    job_category: str = Field(..., min_length=1, max_length=200)
    options: EnhancementOptions = Field(default_factory=EnhancementOptions)

    @field_validator("resume_text", "job_category", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return sanitize_string(v, max_length=50000) if isinstance(v, str) else v


class GenerateQuestionRequest(BaseModel):
    job_category: str = Field(..., min_length=1, max_length=200)
    experience_level: ExperienceLevel = "mid"
    question_number: int = Field(default=1, ge=1, le=10)
    previous_questions: list[str] = Field(default_factory=list, max_length=20)


class EvaluateResponseRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)
    response: str = Field(..., min_length=1, max_length=10000)
    job_category: str = Field(..., min_length=1, max_length=200)
    experience_level: ExperienceLevel = "mid"

    @field_validator("response", mode="before")
    @classmethod
    def strip_response(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v


@router.post("/enhance-resume")
async def enhance_resume(request: Request, body: EnhanceResumeRequest):
    check_submit_rate_limit(request)
    enhancer = ResumeEnhancer()
    result = await enhancer.enhance_resume(body.resume_text, body.job_category, body.options)
    logger.info("Resume enhanced", extra={"job_category": body.job_category[:50]})
    return {"success": True, **result}


@router.get("/industry-keywords/{industry}")
async def industry_keywords(industry: str):
    enhancer = ResumeEnhancer()
    keywords = await enhancer.generate_industry_keywords(sanitize_string(industry, max_length=200))
    return {"success": True, "industry": industry, "keywords": keywords}


@router.post("/interview/generate-question")
async def generate_question(body: GenerateQuestionRequest):
    simulator = InterviewSimulator()
    result = await simulator.generate_question(
        job_category=body.job_category,
        experience_level=body.experience_level,
        question_number=body.question_number,
        previous_questions=body.previous_questions,
    )
    return {"success": True, "question_number": body.question_number, **result}


@router.post("/interview/evaluate-response")
async def evaluate_response(body: EvaluateResponseRequest):
    simulator = InterviewSimulator()
    result = await simulator.evaluate_response(
        question=body.question,
        response=body.response,
        job_category=body.job_category,
        experience_level=body.experience_level,
    )
    return {"success": True, **result}


@router.get("/interview/tips/{job_category}")
async def interview_tips(job_category: str):
    simulator = InterviewSimulator()
    tips = await simulator.generate_tips(sanitize_string(job_category, max_length=200))
    return {"success": True, "job_category": job_category, "tips": tips}
