from plumbprep.services.ai.ai_agents import (
    JobPostingReview,
    PipeSizeRecommendation,
    get_job_review_agent,
    get_mentor_agent,
    get_pipe_sizing_agent,
)

MAX_HISTORY_MESSAGES = 10


def _format_job_posting(
    title: str, company: str, location: str, description: str, requirements: list[str]
) -> str:
    lines = [
        f"Title: {title}",
        f"Company: {company}",
        f"Location: {location}",
        "",
        description,
    ]
    if requirements:
        lines += ["", "Requirements:", *(f"- {r}" for r in requirements)]
    return "\n".join(lines)


async def get_mentor_response(
    message: str, history: list[dict[str, str]] | None = None, context: str | None = None
) -> str:
    agent = get_mentor_agent()
    prompt_parts = []
    if context:
        prompt_parts.append(f"The apprentice is studying: {context}")
    for entry in (history or [])[-MAX_HISTORY_MESSAGES:]:
        prompt_parts.append(f"{entry['role']}: {entry['content']}")
    prompt_parts.append(f"user: {message}")

    result = await agent.run("\n".join(prompt_parts))
    return result.output


async def review_job_posting(
    title: str, company: str, location: str, description: str, requirements: list[str]
) -> JobPostingReview:
    agent = get_job_review_agent()
    result = await agent.run(
        _format_job_posting(title, company, location, description, requirements)
    )
    return result.output


async def get_pipe_size_recommendation(
    fixture_units: int, pipe_length: int, material: str
) -> PipeSizeRecommendation:
    agent = get_pipe_sizing_agent()
    result = await agent.run(
        f"Calculate the proper pipe size for {fixture_units} fixture units over "
        f"{pipe_length} feet using {material} pipe."
    )
    return result.output
