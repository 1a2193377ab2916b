from __future__ import annotations
import math
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


ChartType = Literal["line", "bar", "pie", "doughnut"]
# Integers stay integers so a chart round-trips as it was generated
Number = Union[int, float]


def _is_finite(x: Number) -> bool:
	# Large ints overflow math.isfinite but are always finite
	return isinstance(x, int) or math.isfinite(x)


class XAxis(BaseModel):
	model_config = ConfigDict(extra="allow")

	label: str
	values: List[str]

	@field_validator("values", mode="before")
	@classmethod
	def _stringify(cls, v: Any) -> Any:
		# Years and other categories often come back as numbers
		if isinstance(v, list):
			return [x if isinstance(x, str) else str(x) for x in v]
		return v


class YAxis(BaseModel):
	model_config = ConfigDict(extra="allow")

	label: str
	min: Optional[Number] = None
	max: Optional[Number] = None

	@field_validator("min", "max")
	@classmethod
	def _finite_bound(cls, v: Optional[Number]) -> Optional[Number]:
		if v is not None and not _is_finite(v):
			raise ValueError("axis bounds must be finite")
		return v


class Dataset(BaseModel):
	model_config = ConfigDict(extra="allow")

	label: str
	color: str
	data: List[Number]

	@field_validator("data")
	@classmethod
	def _finite_points(cls, v: List[Number]) -> List[Number]:
		# inf and NaN cannot be sent back as JSON
		if not all(_is_finite(x) for x in v):
			raise ValueError("data points must be finite")
		return v


class ChartDescription(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="allow")

	type: ChartType
	title: str
	x_axis: XAxis = Field(alias="xAxis")
	y_axis: YAxis = Field(alias="yAxis")
	datasets: List[Dataset] = Field(min_length=1)

	def to_payload(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True)


class ChartExtraction(BaseModel):
	assignment_text: str
	chart: ChartDescription
	used_fallback: bool


class GenerationResult(BaseModel):
	assignment_text: str
	chart: Optional[ChartDescription] = None
	used_fallback: bool = False
	# The generative API call itself failed and static content was served
	upstream_failed: bool = False


class CriterionScore(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="allow")

	score: float = Field(ge=0.0, le=9.0)
	feedback: str = ""
	strengths: List[str] = Field(default_factory=list)
	areas_for_improvement: List[str] = Field(default_factory=list, alias="areasForImprovement")


class StructuredAssessment(BaseModel):
	"""Multi-criterion evaluation parsed out of the model's answer."""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	assessment: Dict[str, CriterionScore]
	overall_band_score: float = Field(alias="overallBandScore", ge=0.0, le=9.0)
	specific_improvements: List[str] = Field(default_factory=list, alias="specificImprovements")
	summary: str = ""
	# Reading and listening only
	correct_answer: Optional[str] = Field(default=None, alias="correctAnswer")
	variant: str = ""

	def to_payload(self, tag_field: str) -> Dict[str, Any]:
		data = self.model_dump(by_alias=True, exclude={"variant"}, exclude_none=True)
		data[tag_field] = self.variant
		return data


class DiagnosticAssessment(BaseModel):
	"""Raw model output kept verbatim when no structured assessment could be read."""

	text_response: str
	error: str
	variant: str = ""

	def to_payload(self, tag_field: str) -> Dict[str, Any]:
		return {"textResponse": self.text_response, "error": self.error, tag_field: self.variant}


AssessmentResult = Union[StructuredAssessment, DiagnosticAssessment]


class CounterResult(BaseModel):
	counter: int
	is_new: bool


class AssessmentOutcome(BaseModel):
	result: AssessmentResult
	counter: int
	demo_complete: bool
