from __future__ import annotations
from typing import Dict


def build_assessment_prompt(
    subject: str,
    criteria: Dict[str, str],
    *,
    with_correct_answer: bool,
    source: str,
    skill: str,
) -> str:
    """
    Examiner instructions for one section/variant.

    Every section asks for the same JSON shape; only the criterion keys and
    the optional ``correctAnswer`` field differ.

    Args:
        subject: what is being evaluated, e.g. "an IELTS Writing Task 1 assignment"
        criteria: JSON key -> human description, in output order
        with_correct_answer: ask for ``correctAnswer`` (reading and listening)
        source: where the correct answer comes from ("passage", "transcript")
        skill: the skill the feedback should help improve
    """
    criteria_lines = "\n".join(f"- {text}" for text in criteria.values())
    criterion_block = ",\n".join(
        f'    "{key}": {{"score": number, "feedback": "string", "strengths": ["string"], "areasForImprovement": ["string"]}}'
        for key in criteria
    )
    extra = f',\n  "correctAnswer": "the correct answer according to the {source}"' if with_correct_answer else ""
    return (
        f"You are an expert IELTS examiner evaluating a student's response to {subject}.\n\n"
        f"You will receive the original {source} and the student's response.\n\n"
        f"Assess the response on these criteria:\n{criteria_lines}\n\n"
        "For each criterion give a band score from 0.0 to 9.0 in 0.5 steps, specific feedback with examples "
        "from the response, strengths and areas for improvement. The overall band score is the average of the "
        "criteria scores. Finish with 2-3 specific improvements and a 2-3 sentence summary.\n\n"
        "Return a JSON object with exactly this structure:\n"
        "{\n"
        '  "assessment": {\n'
        f"{criterion_block}\n"
        "  },\n"
        '  "overallBandScore": number,\n'
        '  "specificImprovements": ["string"],\n'
        f'  "summary": "string"{extra}\n'
        "}\n\n"
        f"Be fair, constructive and specific, and focus on helping the student improve their IELTS {skill} skills."
    )


def build_submission_prompt(kind: str, assignment: str, answer_label: str, user_response: str, closing: str) -> str:
    return (
        f"Here is the {kind}:\n\n{assignment}\n\n"
        f"And here is the student's {answer_label}:\n\n{user_response}\n\n"
        f"{closing}"
    )
