from __future__ import annotations
from ..extraction import extract_chart_payload, get_fallback_chart
from ..schemas import GenerationResult
from .base import PromptTemplate, SectionService
from .prompts import build_assessment_prompt, build_submission_prompt


_TASK1_SYSTEM = """You will create a standard IELTS Academic Writing Task 1 assignment together with the data for its chart.

Your response MUST have exactly two parts, in this order:

1. The assignment text (150-200 words) as it would be printed on the exam paper. It should introduce the chart and ask the candidate to summarise the main features and make comparisons where relevant.

2. Directly after the assignment text, a single JSON object of this form:

{
  "graphData": {
    "type": "line",
    "title": "Chart title",
    "xAxis": {"label": "X-axis label", "values": ["A", "B", "C", "D", "E"]},
    "yAxis": {"label": "Y-axis label", "min": 0, "max": 100},
    "datasets": [
      {"label": "Series 1", "color": "#FF6384", "data": [25, 45, 60, 75, 80]},
      {"label": "Series 2", "color": "#36A2EB", "data": [40, 30, 50, 65, 80]}
    ]
  }
}

Rules:
- "type" is one of "line", "bar", "pie" or "doughnut".
- Every dataset has exactly as many numbers in "data" as there are entries in xAxis.values.
- A pie or doughnut chart has exactly one dataset whose data adds up to 100.
- Include every field shown above.
- Do not put the JSON in a code block or quotes and do not write anything after it.
- Pick a topic from economics, demographics, environment, education, health, tourism or technology."""

_TASK2_SYSTEM = """Generate one standard IELTS Writing Task 2 assignment.

Pick one question format at random: agree/disagree, discuss both views and give an opinion, advantages/disadvantages, problem/solution, or a two-part question.

Pick a topic at random from common IELTS themes: education, technology, environment, health, society and culture, work and careers, media and communication, transportation.

The prompt should be challenging but accessible to non-native speakers. Include the usual instructions about supporting the answer with reasons and examples and writing at least 250 words."""


TASK1_CRITERIA = {
    "taskAchievement": "Task Achievement (are all parts of the task covered and the main features and trends in the data described accurately?)",
    "coherenceAndCohesion": "Coherence and Cohesion (is the response well organised with appropriate linking?)",
    "lexicalResource": "Lexical Resource (range and appropriacy of vocabulary)",
    "grammaticalRangeAndAccuracy": "Grammatical Range and Accuracy (sentence structures and grammar)",
}

TASK2_CRITERIA = {
    "taskResponse": "Task Response (are all parts of the task addressed with a clear position and relevant, extended ideas?)",
    "coherenceAndCohesion": "Coherence and Cohesion (paragraphing and linking devices)",
    "lexicalResource": "Lexical Resource (range, appropriacy and precision of vocabulary)",
    "grammaticalRangeAndAccuracy": "Grammatical Range and Accuracy (variety and accuracy of structures)",
}


class WritingService(SectionService):
    section = "writing"
    tag_field = "taskType"
    variants = ("task1", "task2")
    generation_prompts = {
        "task1": PromptTemplate(
            system=_TASK1_SYSTEM,
            user="Generate an IELTS Writing Task 1 assignment with a graph.",
            max_tokens=1500,
            temperature=0.7,
        ),
        "task2": PromptTemplate(
            system=_TASK2_SYSTEM,
            user="Generate an IELTS Writing Task 2 assignment.",
            max_tokens=1000,
            temperature=0.8,
        ),
    }
    fallback_assignments = {
        "task1": (
            "The chart below shows the percentage of people living in urban areas in different regions "
            "of the world in 1950 and 2010, with projections for 2050. Summarise the information by "
            "selecting and reporting the main features, and make comparisons where relevant."
        ),
        "task2": (
            "Some people believe that university education should be free for all students, while others "
            "think students should pay for their own studies. Discuss both views and give your own opinion. "
            "Give reasons for your answer and include any relevant examples from your own knowledge or "
            "experience. Write at least 250 words."
        ),
    }

    def postprocess(self, variant: str, raw: str) -> GenerationResult:
        if variant != "task1":
            return super().postprocess(variant, raw)
        extracted = extract_chart_payload(raw)
        return GenerationResult(
            assignment_text=extracted.assignment_text,
            chart=extracted.chart,
            used_fallback=extracted.used_fallback,
        )

    def fallback(self, variant: str) -> GenerationResult:
        result = super().fallback(variant)
        if variant == "task1":
            result.chart = get_fallback_chart()
        return result

    def assessment_system_prompt(self, variant: str) -> str:
        criteria = TASK1_CRITERIA if variant == "task1" else TASK2_CRITERIA
        return build_assessment_prompt(
            f"an IELTS Writing {self.label(variant)} assignment",
            criteria,
            with_correct_answer=False,
            source="assignment",
            skill="writing",
        )

    def assessment_user_prompt(self, assignment: str, user_response: str, variant: str) -> str:
        label = self.label(variant)
        return build_submission_prompt(
            f"IELTS Writing {label} assignment",
            assignment,
            "response",
            user_response,
            f"Please evaluate this writing sample according to IELTS {label} criteria.",
        )
