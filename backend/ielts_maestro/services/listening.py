from __future__ import annotations

from .base import PromptTemplate, SectionService
from .prompts import build_assessment_prompt, build_submission_prompt


_PART1_SYSTEM = """You will create a short listening exercise for IELTS Listening Part 1 (a conversation in a social context).

The exercise is a conversation between two people of about 150-200 words followed by one question about it.

Lay the response out as:
1. A title describing the situation
2. The transcript, with each speaker clearly marked
3. A line of dashes
4. The question

Choose an everyday situation such as making arrangements, booking tickets, asking about a service, social plans, travel or accommodation. Keep the language natural but clear and use British English."""

_PART2_SYSTEM = """You will create a short listening exercise for IELTS Listening Part 2 (a monologue in a social context).

The exercise is a monologue by one speaker of about 200-250 words followed by one question about it.

Lay the response out as:
1. A title describing the situation
2. The transcript, in paragraphs
3. A line of dashes
4. The question

Choose an everyday situation such as a talk about local facilities, an event announcement, a tour guide's description, instructions for using a service, information about a course, or a radio item about a community event. Keep the language natural but clear and use British English."""


PART1_CRITERIA = {
    "accuracy": "Accuracy (is the answer correct based on the transcript?)",
    "comprehension": "Comprehension (does the student understand what they heard?)",
    "detail": "Detail (did the student capture the specific details correctly?)",
}

PART2_CRITERIA = {
    **PART1_CRITERIA,
    "mainIdeaRecognition": "Main Idea Recognition (did the student understand the main point or purpose?)",
}


class ListeningService(SectionService):
    section = "listening"
    tag_field = "partType"
    variants = ("part1", "part2")
    generation_prompts = {
        "part1": PromptTemplate(
            system=_PART1_SYSTEM,
            user="Generate an IELTS Listening Part 1 exercise.",
            max_tokens=1500,
            temperature=0.7,
        ),
        "part2": PromptTemplate(
            system=_PART2_SYSTEM,
            user="Generate an IELTS Listening Part 2 exercise.",
            max_tokens=1500,
            temperature=0.7,
        ),
    }
    fallback_assignments = {
        "part1": (
            "Conversation between two friends discussing weekend plans:\n\n"
            "Woman: So, what are you planning to do this weekend?\n"
            "Man: I'm thinking of going to that new exhibition at the city museum. I heard it's really good.\n"
            "Woman: Oh, which one?\n"
            "Man: It's the Ancient Egypt one. They've got some artifacts that have never been shown here before.\n"
            "Woman: That sounds interesting! What day were you thinking of going?\n"
            "Man: I was planning to go on Saturday morning, around 10.\n\n"
            "Question: What is the man planning to see at the museum?"
        ),
        "part2": (
            "Welcome to Riverside Community Centre\n\n"
            "Good evening, everyone, and thank you for coming to tonight's open evening. I'd like to tell you "
            "a little about what the centre offers. On the ground floor you'll find the café, which is open "
            "from eight in the morning until six, and the main hall, which can be booked for private events at "
            "weekends. Upstairs there are three studios used for dance, yoga and art classes.\n\n"
            "This term we're introducing a new photography course on Thursday evenings. It's aimed at complete "
            "beginners, and cameras can be borrowed from reception, so there's no need to buy your own "
            "equipment. Places are limited to twelve, so please sign up at the front desk before you leave.\n\n"
            "----------\n\n"
            "Question: What does the speaker say about the new photography course?"
        ),
    }

    def assessment_system_prompt(self, variant: str) -> str:
        criteria = PART1_CRITERIA if variant == "part1" else PART2_CRITERIA
        return build_assessment_prompt(
            f"an IELTS Listening {self.label(variant)} question",
            criteria,
            with_correct_answer=True,
            source="transcript",
            skill="listening",
        )

    def assessment_user_prompt(self, assignment: str, user_response: str, variant: str) -> str:
        return build_submission_prompt(
            f"IELTS Listening {self.label(variant)} transcript and question",
            assignment,
            "answer",
            user_response,
            "Please evaluate this listening response according to IELTS criteria.",
        )
