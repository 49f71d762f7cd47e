"""Extraction tiers turning generated content into partial results.

Tiers are tried in a fixed order by `ExtractionChain`:

1. StructuredPayloadTier - content already arrived as a mapping
2. EmbeddedBlockTier - JSON object inside a fenced block or prose
3. FreeTextTier - labeled metrics and sectioned lines in plain prose

Each tier returns a partial dict (missing fields allowed) or None when it
does not apply. A tier that applies but fails raises ExtractionError, which
the chain logs before moving on.
"""

import json
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from ..exceptions import ExtractionError
from ..models.parameters import ModelParameters
from ..models.results import Confidence, Source
from . import defaults
from .content import Content, RawText, Structured
from .resolve import clean_line, first_present, usable_number

logger = logging.getLogger(__name__)

KINDS = ("prediction", "analysis", "budget")

PREDICTION_WRAPPERS = ("predictions", "previsao_detalhada")
RECOMMENDATION_KEYS = ("recommendations", "recomendacoes_otimizacao")
_PREDICTION_PASSTHROUGH = ("confidence_factors", "source", "confidence", "note")
_BUDGET_META_KEYS = ("allocation", "expected_roi_improvement", "rationale", "source")

Shape = Callable[[Mapping[str, Any]], dict[str, Any] | None]


# =============================================================================
# PAYLOAD SHAPES
# =============================================================================


def prediction_shape(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize wrapped and top-level prediction payloads to one partial.

    `{"predictions": {"ctr": ...}}` and `{"ctr": ...}` produce the same
    partial. Portuguese wrapper keys are accepted.
    """
    metrics = first_present(payload, *PREDICTION_WRAPPERS)
    if not isinstance(metrics, Mapping):
        metrics = payload

    partial: dict[str, Any] = {
        "predictions": dict(metrics),
        "recommendations": first_present(payload, *RECOMMENDATION_KEYS),
    }
    for key in _PREDICTION_PASSTHROUGH:
        if key in payload:
            partial[key] = payload[key]
    return partial


def analysis_shape(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Analysis payloads pass through, with the recommendations alias resolved."""
    partial = dict(payload)
    partial["recommendations"] = first_present(payload, *RECOMMENDATION_KEYS)
    return partial


def budget_shape(payload: Mapping[str, Any]) -> dict[str, Any] | None:
    """Channel -> percent from `allocation`, or from the whole object.

    Returns None when no channel carries a usable non-negative share.
    """
    allocation = payload.get("allocation")
    if isinstance(allocation, Mapping):
        candidates = allocation.items()
    else:
        candidates = [
            (key, value) for key, value in payload.items() if key not in _BUDGET_META_KEYS
        ]

    shares: dict[str, float] = {}
    for channel, value in candidates:
        share = usable_number(value)
        if share is not None and share >= 0:
            shares[str(channel)] = share

    if not shares:
        return None
    return {
        "allocation": shares,
        "expected_roi_improvement": payload.get("expected_roi_improvement"),
        "rationale": payload.get("rationale"),
        "source": payload.get("source"),
    }


_SHAPES: dict[str, Shape] = {
    "prediction": prediction_shape,
    "analysis": analysis_shape,
    "budget": budget_shape,
}


# =============================================================================
# TIERS 1-2: STRUCTURED AND EMBEDDED JSON
# =============================================================================


class StructuredPayloadTier:
    """Content that arrived as an already-parsed mapping."""

    name = "structured_payload"

    def __init__(self, shape: Shape):
        self.shape = shape

    def extract(self, content: Content) -> dict[str, Any] | None:
        if not isinstance(content, Structured):
            return None
        return self.shape(content.value)


_FENCED_BLOCK = re.compile(r"```[\w-]*\s*(.*?)```", re.DOTALL)


def find_json_block(text: str) -> str | None:
    """Locate a JSON object candidate in generated text.

    A fenced block containing `{` wins. Otherwise the first top-level
    balanced `{...}` span is returned, skipping braces inside JSON strings.
    """
    for match in _FENCED_BLOCK.finditer(text):
        block = match.group(1).strip()
        if "{" in block:
            return block

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


class EmbeddedBlockTier:
    """JSON object embedded in free text."""

    name = "embedded_block"

    def __init__(self, shape: Shape):
        self.shape = shape

    def extract(self, content: Content) -> dict[str, Any] | None:
        """Parse the embedded object.

        Raises:
            ExtractionError: If the block is not valid JSON or not an object.
        """
        if not isinstance(content, RawText):
            return None

        block = find_json_block(content.text)
        if block is None:
            return None

        try:
            parsed = json.loads(block)
        except json.JSONDecodeError as e:
            raise ExtractionError(self.name, f"invalid JSON: {e.msg}") from e

        if not isinstance(parsed, dict):
            raise ExtractionError(self.name, f"expected an object, got {type(parsed).__name__}")

        logger.debug("Parsed embedded JSON block (%d chars)", len(block))
        return self.shape(parsed)


# =============================================================================
# TIER 3: FREE TEXT
# =============================================================================

_METRIC_KEYWORDS = {
    "ctr": r"ctr|click[- ]?through(?: rate)?|taxa de cliques",
    "conversion_rate": r"conversion(?: rate)?|taxa de convers[aã]o|convers[aã]o",
    "roi": r"roi|return on (?:ad )?investment|retorno(?: sobre (?:o )?investimento)?",
    "cpa": r"cpa|cost per acquisition|custo por aquisi[cç][aã]o",
}
_RATE_METRICS = ("ctr", "conversion_rate")

# "1,250" (thousands), "3.2", "2,5" (decimal comma, 1-2 digits), "40"
_NUMBER = (
    r"(?<![\d.,])(?P<number>\d{1,3}(?:,\d{3})+(?:\.\d+)?(?!\d)"
    r"|\d+\.\d+|\d+,\d{1,2}(?!\d)|\d+)\s*(?P<percent>%)?"
)
_GAP = r"(?P<gap>[^\d\n]{0,40}?)"
_THOUSANDS = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?")

# A number ending one list item never labels the next: "210%, CPA: 40"
_ITEM_SEPARATOR = re.compile(r"[,;|.]")
_LABEL_MARK = re.compile(r"^\s*[:=]")


def _keyword_pattern(keywords: str) -> str:
    return rf"\b(?:{keywords})\b"


def _metric_patterns(name: str) -> tuple[re.Pattern, re.Pattern, re.Pattern]:
    keyword = _keyword_pattern(_METRIC_KEYWORDS[name])
    others = "|".join(kw for other, kw in _METRIC_KEYWORDS.items() if other != name)
    return (
        re.compile(_NUMBER + _GAP + keyword, re.IGNORECASE),  # "3.2% CTR"
        re.compile(keyword + _GAP + _NUMBER, re.IGNORECASE),  # "ROI of 210%"
        re.compile(_keyword_pattern(others), re.IGNORECASE),
    )


_METRIC_PATTERNS = {name: _metric_patterns(name) for name in _METRIC_KEYWORDS}

RECOMMENDATION_HEADINGS = ("recommend", "suggest", "next step", "recomenda", "sugest", "próximo")

_ANALYSIS_SECTIONS = (
    ("strengths", ("strength", "forte", "positivo", "vantagem")),
    ("weaknesses", ("weakness", "fraco", "desafio", "challenge")),
    (
        "recommendations",
        ("recommend", "suggest", "next step", "action", "recomendo", "sugiro", "próximo passo"),
    ),
    ("insights", ("insight", "opportunit", "oportunidade", "strateg", "estratégia")),
)
_MAX_HEADING_LENGTH = 40

_BUDGET_LINE = re.compile(
    r"\b(search|social|display|video|google|facebook|instagram)\b[^\n]*?(\d+(?:\.\d+)?)\s*%",
    re.IGNORECASE,
)


def find_metric(text: str, name: str) -> tuple[float, bool] | None:
    """Find a labeled metric value in prose.

    Both "number ... keyword" and "keyword ... number" orders are tried. The
    gap between them may not hold digits, line breaks or another metric's
    keyword. A number-first gap may not cross a list separator either.
    Labels written as "keyword: number" win, then the shortest gap.

    Returns:
        (value, written_as_percent), or None when the metric is not mentioned.
    """
    number_first, keyword_first, other_keywords = _METRIC_PATTERNS[name]
    candidates = []
    for order, pattern in enumerate((number_first, keyword_first)):
        for match in pattern.finditer(text):
            gap = match.group("gap")
            if other_keywords.search(gap):
                continue
            if pattern is number_first and _ITEM_SEPARATOR.search(gap):
                continue
            labeled = pattern is keyword_first and _LABEL_MARK.match(gap) is not None
            candidates.append((not labeled, len(gap), order, match.start(), match))

    if not candidates:
        return None

    best = min(candidates, key=lambda candidate: candidate[:4])[4]
    return parse_metric_number(best.group("number")), best.group("percent") is not None


def parse_metric_number(text: str) -> float:
    """Float from "1,250" (thousands group), "2,5" (decimal comma) or "3.2"."""
    if _THOUSANDS.fullmatch(text):
        return float(text.replace(",", ""))
    return float(text.replace(",", "."))


class FreeTextTier:
    """Pattern-based extraction from prose, tagged as text analysis."""

    name = "free_text"

    def __init__(self, kind: str = "prediction", parameters: ModelParameters | None = None):
        if kind not in KINDS:
            raise ValueError(f"Unknown extraction kind: {kind!r}. Expected one of {KINDS}")
        self.kind = kind
        self.parameters = parameters or ModelParameters()

    def extract(self, content: Content) -> dict[str, Any] | None:
        if not isinstance(content, RawText):
            return None
        if self.kind == "prediction":
            return self.extract_prediction(content.text)
        if self.kind == "analysis":
            return self.extract_analysis(content.text)
        return self.extract_budget(content.text)

    def extract_prediction(self, text: str) -> dict[str, Any] | None:
        """Labeled metrics plus lines following a recommendation heading."""
        p = self.parameters
        found: dict[str, float] = {}
        for name in _METRIC_PATTERNS:
            match = find_metric(text, name)
            if match is None:
                continue
            value, is_percent = match
            if name in _RATE_METRICS and (is_percent or value > 1):
                value /= 100
            found[name] = value

        recommendations = self._recommendation_lines(text)
        if not found and not recommendations:
            return None

        roi = found.get("roi", p.default_roi)
        return {
            "predictions": {
                "ctr": found.get("ctr", p.default_ctr),
                "conversion_rate": found.get("conversion_rate", p.default_conversion_rate),
                "roi": roi,
                "cpa": found.get("cpa", p.default_cpa),
                "estimated_revenue": p.revenue_base * roi / 100 + p.revenue_base,
            },
            "recommendations": recommendations or list(defaults.TEXT_PREDICTION_RECOMMENDATIONS),
            "confidence_factors": dict(defaults.DEFAULT_CONFIDENCE_FACTORS),
            "source": Source.TEXT_ANALYSIS.value,
            "confidence": Confidence.MEDIUM.value,
            "note": defaults.TEXT_PREDICTION_NOTE,
        }

    def _recommendation_lines(self, text: str) -> list[str]:
        lines: list[str] = []
        in_section = False
        for line in text.splitlines():
            if any(heading in line.lower() for heading in RECOMMENDATION_HEADINGS):
                in_section = True
                continue
            stripped = line.strip()
            if (
                in_section
                and len(stripped) > self.parameters.min_text_recommendation_length
                and not stripped.startswith(("#", "*", "-"))
            ):
                lines.append(stripped)
        return lines

    def extract_analysis(self, text: str) -> dict[str, Any] | None:
        """Bucket lines into strengths, weaknesses, recommendations and insights."""
        p = self.parameters
        buckets: dict[str, list[str]] = {name: [] for name, _ in _ANALYSIS_SECTIONS}
        section: str | None = None

        for line in text.splitlines():
            heading = self._section_heading(line)
            if heading is not None:
                section = heading
                continue
            if section is None:
                continue

            cleaned = clean_line(line)
            min_length = (
                p.min_text_recommendation_length + 1
                if section == "insights"
                else p.min_recommendation_length
            )
            if len(cleaned) >= min_length:
                buckets[section].append(cleaned)

        if not any(buckets.values()):
            return None

        return {
            "performance_analysis": {
                "summary": defaults.TEXT_ANALYSIS_SUMMARY,
                "strengths": buckets["strengths"],
                "weaknesses": buckets["weaknesses"],
                "overall_score": p.text_analysis_score,
                "alerts": [],
            },
            "strategic_insights": buckets["insights"],
            "recommendations": buckets["recommendations"],
            "outlook": {
                "next_30_days": defaults.TEXT_OUTLOOK_NEXT_30_DAYS,
                "confidence": defaults.TEXT_OUTLOOK_CONFIDENCE,
                "key_metrics": list(defaults.TEXT_OUTLOOK_KEY_METRICS),
            },
            "source": Source.TEXT_ANALYSIS.value,
            "confidence": Confidence.MEDIUM.value,
            "note": defaults.TEXT_ANALYSIS_NOTE,
        }

    @staticmethod
    def _section_heading(line: str) -> str | None:
        """Section a heading line opens, or None for content lines.

        Headings are short, marked with `#` or end in a colon.
        """
        stripped = line.strip()
        is_heading = (
            stripped.startswith("#")
            or stripped.endswith(":")
            or len(stripped) <= _MAX_HEADING_LENGTH
        )
        if not stripped or not is_heading:
            return None

        lower = stripped.lower()
        for section, keywords in _ANALYSIS_SECTIONS:
            if any(keyword in lower for keyword in keywords):
                return section
        return None

    def extract_budget(self, text: str) -> dict[str, Any] | None:
        """`channel ... N%` lines, later lines overriding earlier ones."""
        shares: dict[str, float] = {}
        for line in text.splitlines():
            match = _BUDGET_LINE.search(line)
            if match:
                shares[match.group(1).lower()] = float(match.group(2))

        if not shares:
            return None
        return {
            "allocation": shares,
            "expected_roi_improvement": defaults.BUDGET_ROI_IMPROVEMENT,
            "rationale": defaults.TEXT_BUDGET_RATIONALE,
            "source": Source.TEXT_ANALYSIS.value,
        }


# =============================================================================
# CHAIN
# =============================================================================


class ExtractionChain:
    """Runs tiers in order; the first non-None partial wins."""

    def __init__(self, tiers: list):
        self.tiers = list(tiers)

    @classmethod
    def for_kind(
        cls, kind: str, parameters: ModelParameters | None = None
    ) -> "ExtractionChain":
        """Standard three-tier chain for a result kind."""
        if kind not in _SHAPES:
            raise ValueError(f"Unknown extraction kind: {kind!r}. Expected one of {KINDS}")
        shape = _SHAPES[kind]
        return cls(
            [
                StructuredPayloadTier(shape),
                EmbeddedBlockTier(shape),
                FreeTextTier(kind, parameters),
            ]
        )

    def extract(self, content: Content) -> dict[str, Any] | None:
        for tier in self.tiers:
            try:
                partial = tier.extract(content)
            except ExtractionError as e:
                logger.info("Extraction tier %s failed, trying next: %s", e.tier, e.reason)
                continue

            if partial is not None:
                logger.debug("Content extracted by tier %s", tier.name)
                return partial

        logger.info("No extraction tier matched %s content", type(content).__name__)
        return None
