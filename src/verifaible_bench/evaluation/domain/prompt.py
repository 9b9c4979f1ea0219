"""User prompt generation — turns a test case into the agent's task."""

from verifaible_bench.dataset.domain.case import TestCase


def build_user_prompt(case: TestCase) -> str:
    """Render the task for a case; video cases get the transcript workflow."""
    if case.category.startswith("video"):
        return (
            "Get the information from the video and create a verifiable citation:\n"
            "\n"
            f"URL: {case.url}\n"
            f"Question: {case.question}\n"
            "\n"
            "Requirements:\n"
            "1. Search for the target video first, then read its subtitles with video_transcript\n"
            "2. Find the answer in the transcript and note its timestamp in seconds\n"
            '3. Create a verifiable citation (verifaible_cite) with evidence_type="video" '
            "and the timestamp parameter\n"
            "4. Include the concrete answer and the [@v:ID] citation marker in the final answer"
        )

    return (
        "Get the data from the web page below and create a verifiable citation:\n"
        "\n"
        f"URL: {case.url}\n"
        f"Question: {case.question}\n"
        "\n"
        "Requirements:\n"
        "1. Visit the URL above and find the data that answers the question\n"
        "2. Create a verifiable evidence citation (verifaible_cite)\n"
        "3. Include the concrete data and the [@v:ID] citation marker in the final answer"
    )
