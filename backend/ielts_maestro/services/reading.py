from __future__ import annotations

from .base import PromptTemplate, SectionService
from .prompts import build_assessment_prompt, build_submission_prompt


_TEXT1_SYSTEM = """You will create a short reading passage for IELTS General Training Reading Section 1.

Write about 150-200 words of an everyday text such as a public notice, an advertisement, a timetable, a brochure, an instruction leaflet, or a letter or email.

After the passage add ONE question about it, using multiple choice, True/False/Not Given, or identifying information.

Lay the response out as:
1. A title, if the kind of text has one
2. The passage
3. A line of dashes
4. The instruction for the question (for example "Choose the correct letter, A, B, C or D")
5. The question, with options if it is multiple choice

Keep vocabulary and sentence structure simple and clear, as in Section 1."""

_TEXT2_SYSTEM = """You will create a longer reading passage for IELTS General Training Reading Section 3.

Write about 400-500 words on a general-interest topic such as a scientific discovery, a historical event, a social issue, a cultural practice, an environmental topic or a technology development.

After the passage add ONE question about it, using multiple choice, True/False/Not Given, Yes/No/Not Given, matching information, matching headings or summary completion.

Lay the response out as:
1. The title of the passage
2. The passage
3. A line of dashes
4. The instruction for the question
5. The question, with options if it is multiple choice

Use a wider range of vocabulary and more complex sentences than in Section 1."""


TEXT1_CRITERIA = {
    "accuracy": "Accuracy (is the answer correct according to the passage?)",
    "comprehension": "Comprehension (does the student understand the passage and the question?)",
    "reasoning": "Reasoning (how well does the student explain the answer?)",
}

TEXT2_CRITERIA = {
    **TEXT1_CRITERIA,
    "analyticalSkills": "Analytical Skills (how well does the student handle the more complex information?)",
}


class ReadingService(SectionService):
    section = "reading"
    tag_field = "textType"
    variants = ("text1", "text2")
    generation_prompts = {
        "text1": PromptTemplate(
            system=_TEXT1_SYSTEM,
            user="Generate an IELTS General Training Reading Section 1 passage with one question.",
            max_tokens=1500,
            temperature=0.7,
        ),
        "text2": PromptTemplate(
            system=_TEXT2_SYSTEM,
            user="Generate an IELTS General Training Reading Section 3 passage with one question.",
            max_tokens=2000,
            temperature=0.7,
        ),
    }
    fallback_assignments = {
        "text1": (
            "The koala is a small marsupial native to Australia. It spends most of its time in eucalyptus "
            "trees and feeds almost exclusively on eucalyptus leaves. Koalas sleep for up to 20 hours a day "
            "and are primarily nocturnal animals. Their slow metabolism helps them conserve energy. "
            "Question: According to the passage, what is the koala's primary source of food?"
        ),
        "text2": (
            "The Return of the Night Train\n\n"
            "For decades, overnight rail services across Europe were in decline. Cheap flights and faster "
            "daytime trains drew passengers away, and many operators withdrew their sleeper carriages "
            "altogether. In recent years, however, night trains have made an unexpected comeback. Rising "
            "concern about the environmental cost of short-haul flights has led many travellers to look for "
            "alternatives, and governments have begun to subsidise new routes linking major cities.\n\n"
            "Supporters argue that a night train saves both a hotel bill and a working day, since passengers "
            "arrive in the city centre refreshed and ready to start. Critics point out that tickets are often "
            "more expensive than flights and that the carriages in service are frequently old and "
            "uncomfortable. Operators reply that new rolling stock, with private compartments and improved "
            "catering, is already being introduced.\n\n"
            "----------\n\n"
            "Do the following statements agree with the views of the writer? Write YES, NO or NOT GIVEN.\n\n"
            "Question: Night train tickets are usually cheaper than flights on the same route."
        ),
    }

    def assessment_system_prompt(self, variant: str) -> str:
        criteria = TEXT1_CRITERIA if variant == "text1" else TEXT2_CRITERIA
        subject = "an IELTS Reading question" if variant == "text1" else "a more complex IELTS Reading question from Section 3"
        return build_assessment_prompt(
            subject,
            criteria,
            with_correct_answer=True,
            source="passage",
            skill="reading",
        )

    def assessment_user_prompt(self, assignment: str, user_response: str, variant: str) -> str:
        return build_submission_prompt(
            f"IELTS Reading {self.label(variant)} passage and question",
            assignment,
            "answer",
            user_response,
            "Please evaluate this reading response according to IELTS criteria.",
        )
