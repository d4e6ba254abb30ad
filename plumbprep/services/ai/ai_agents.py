from pydantic import BaseModel
from pydantic_ai import Agent

from plumbprep.services.ai.ai_model import get_ai_model


def get_mentor_agent() -> Agent[None, str]:
    return Agent(
        get_ai_model(),
        output_type=str,
        instructions="""
        You are an experienced Louisiana master plumber mentoring an apprentice who is
        preparing for the Louisiana State Plumbing Board journeyman exam.
        Answer questions about the Louisiana State Plumbing Code, the International Plumbing
        Code it is based on, pipe sizing, venting, drainage, water supply, backflow prevention
        and gas piping. Cite code sections when you know them and say so when you are not sure.
        Keep answers short and practical: a direct answer first, then at most a few bullet points.
        Do not give answers to exam questions verbatim; explain the reasoning instead.
        """,
    )


class JobPostingReview(BaseModel):
    approved: bool
    reasoning: str


def get_job_review_agent() -> Agent[None, JobPostingReview]:
    return Agent(
        get_ai_model(),
        output_type=JobPostingReview,
        instructions="""
        You review job postings submitted to a job board for plumbers in Louisiana.
        Approve a posting when it is a genuine plumbing or closely related trade job with a
        clear description. Reject postings that are spam, scams, unrelated to the trade,
        ask applicants for payment, or contain discriminatory or offensive language.
        Give a one or two sentence reasoning for your decision.
        """,
    )


class PipeSizeRecommendation(BaseModel):
    recommended_size: str
    velocity_check: bool
    pressure_loss: float
    explanation: str


def get_pipe_sizing_agent() -> Agent[None, PipeSizeRecommendation]:
    return Agent(
        get_ai_model(),
        output_type=PipeSizeRecommendation,
        instructions="""
        You are a plumbing hydraulics expert. Size a water distribution pipe from the total
        water supply fixture units, the developed length of the run and the pipe material,
        following the Louisiana State Plumbing Code.
        Give the recommended nominal size (for example "3/4 inch"), whether the flow velocity
        stays within code limits, the estimated pressure loss in psi over the run, and a short
        explanation of how you arrived at the size.
        """,
    )
