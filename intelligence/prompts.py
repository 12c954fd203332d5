"""Prompt templates for article selection, deep-dive drafting and schema repair."""

from __future__ import annotations

from models import DeepDiveCategory


ARTICLE_SELECTION_SYSTEM_PROMPT = (
    "You are a seasoned political news editor curating coverage for a key issue. "
    "Select only from the provided articles, never invent new ones, and return valid JSON "
    "that matches the schema exactly."
)

DEEP_DIVE_SYSTEM_PROMPT = (
    "You are a senior campaign data analyst tasked with narrating trends for a political analytics product.\n"
    "Return ONLY valid JSON that conforms to the provided JSON schema. Anchor every claim in the supplied data, "
    "cite concrete figures or date ranges when available, surface notable deltas or anomalies, and flag material "
    "uncertainties instead of speculating. Never invent metrics."
)

DEEP_DIVE_REPAIR_SYSTEM_PROMPT = (
    "You are a meticulous schema enforcer. Convert a draft response into JSON that exactly matches the target "
    "schema, correcting structural issues or missing fields without inventing unsupported metrics."
)

DEEP_DIVE_TYPES_DEFINITION = """type DeepDiveCategory = "fundsRaised" | "donors" | "volunteers" | "events";

interface InsightBlock {
  headline: string;        // Short, compelling headline (<= 140 chars)
  summary: string;         // 1-3 sentences expanding the headline
  bullets: string[];       // 3-8 concise bullet points
  caveats: string[] | null;// Optional risks/uncertainties; null when none
}

interface AxisChartSpec {
  kind: "bar" | "line" | "area";
  title: string;
  narrative: string;        // 2-3 sentence interpretation
  forCategory: DeepDiveCategory | null;
  categories: string[];     // X-axis labels
  values: number[];         // Single numeric series (same length as categories)
  yAxisLabel: string | null;// Unit label or null
}

interface AxisChartMultiSpec {
  kind: "bar" | "line" | "area";
  title: string;
  narrative: string;        // 2-3 sentence interpretation
  forCategory: DeepDiveCategory | null;
  categories: string[];     // X-axis labels
  series: Array<{           // 2-5 labeled series
    label: string;
    data: number[];         // Same length as categories
  }>;
  yAxisLabel: string | null;// Unit label or null
}

interface PieChartSpec {
  kind: "pie";
  title: string;
  narrative: string;        // 2-3 sentence interpretation
  forCategory: DeepDiveCategory | null;
  slices: Array<{
    name: string;
    value: number;
  }>;
  valueLabel: string | null;// What values represent
}

type LlmChartSpec = AxisChartSpec | AxisChartMultiSpec | PieChartSpec;

interface DeepDiveResponse {
  insights: Record<DeepDiveCategory, InsightBlock>;
  chart: LlmChartSpec;
}"""


def article_selection_prompt(issue: str, candidate_count: int, digest: str, max_selected: int = 10) -> str:
    return "\n\n".join(
        [
            f"Key issue: {issue}",
            f"You will receive {candidate_count} candidate articles pulled from major RSS feeds. "
            f"Choose up to {max_selected} that are most relevant to the key issue, prioritizing fresh coverage "
            "(ideally from the past 30 days).",
            "Always return the most relevant options even if perfect matches are unavailable.",
            'Return JSON with the structure {"issue": string, "summary": string, "articles": Article[]}.',
            'Each article must include the fields "title", "link", "source", "description", "publishedAt", '
            'and "imageUrl". Use null for description, publishedAt, or imageUrl when the information is unavailable.',
            "Copy each link exactly as it appears in the candidate list.",
            "Write the summary field as two or three sentences that synthesize the overall coverage trends.",
            "Use ISO 8601 format for publishedAt when a date is provided; otherwise return null.",
            "Derive each article description from the provided summary text without adding new facts.",
            "Candidate articles:",
            digest,
        ]
    )


def deep_dive_prompt(primary: DeepDiveCategory, metrics_digest: str) -> str:
    category = DeepDiveCategory(primary).value
    return "\n".join(
        [
            f"Primary focus category: {category}",
            "You will receive multiple campaign data tables in CSV format. Craft a cohesive story that spotlights "
            "the primary category while incorporating supporting evidence from the other datasets.",
            "Produce exactly ONE chart: the analytically strongest representation of the PRIMARY focus category "
            "using any supporting data for context.",
            "Chart requirements (single best chart):",
            "- Allowed kinds: pie, bar, area, line.",
            "- STRUCTURE: For single-series (bar/line/area), include 'values' array. For multi-series, include "
            "'series' array with label+data. For pie, include 'slices' array. NEVER mix these fields.",
            "- Choosing the kind: use pie ONLY when the story is about proportion across 3-10 segments. "
            "Otherwise use line for a trend over time, area for cumulative growth, and bar for categorical comparison.",
            "- When using pie: ensure slice names are human-readable and valueLabel clarifies the measured unit "
            "(e.g. 'Attendees', 'Donations in USD').",
            "- If comparing multiple related series, use the multi-series axis format (series array) ONLY when the "
            "comparison sharpens the primary category's story; otherwise keep a single series.",
            "- Ensure categories.length matches each series' data length (or values length for single-series).",
            "- Set forCategory to the primary focus category (never null here unless a cross-cutting rationale is "
            "overwhelming and still clarifies the focus).",
            "- Provide yAxisLabel for axis charts (null only if redundant). For pie include valueLabel when meaningful.",
            "Narrative DOs and DON'Ts:",
            "- DO synthesize causes, implications, and cross-metric relationships (e.g., link volunteer growth "
            "preceding fundraising spikes).",
            "- DO surface meaningful contrasts (peaks vs troughs, acceleration vs stagnation, leading vs trailing segments).",
            "- DO write in an engaging, editorial yet objective style, informative and forward-looking without hype.",
            "- DO lead with the most actionable or surprising takeaway, not a bland restatement of numbers.",
            "- DON'T mention or refer to 'the chart', 'this chart', 'the visualization', 'the figure', or 'the graphic'.",
            "- DON'T merely list data points in order; every sentence must add interpretation or relevance.",
            "- DON'T fabricate drivers; only infer relationships clearly supported by temporal ordering or magnitude "
            "shifts in the data.",
            "Insight requirements:",
            "- Lead each summary with the most recent or most material quantified takeaway for that category, "
            "referencing exact numbers, deltas, or timeframes from the tables.",
            "- Draw at least one cross-category connection when it sharpens the takeaway while staying evidence-based.",
            "- Provide concise, data-backed insights for each category with actionable bullet points and optional "
            "caveats (return caveats as an array of short strings, or null when none).",
            "- Highlight risks or uncertainties only when the data directly signals them; otherwise omit speculation.",
            "Style:",
            "- No markdown, percentages should include the % symbol, currency should use dollars.",
            "- Be creative in revealing non-obvious connections but remain data-faithful.",
            "- Do not repeat the same sentence in multiple narratives or insights.",
            "",
            "Type definitions (authoritative schema, follow EXACTLY):",
            DEEP_DIVE_TYPES_DEFINITION,
            "",
            metrics_digest,
        ]
    )


def deep_dive_repair_prompt(primary: DeepDiveCategory, draft: str, violations: list) -> str:
    lines = [
        f"Primary focus category: {DeepDiveCategory(primary).value}",
        "You previously produced the following draft response. It may contain schema violations or missing fields.",
        "Tasks:",
        "- Return strictly valid JSON that matches the schema.",
        "- Preserve the analytical intent and data fidelity of the draft.",
        "- Fill in missing required fields using the draft content only; do not fabricate unsupported metrics.",
        "- The chart must use exactly one of 'values', 'series' or 'slices'.",
    ]
    if violations:
        lines.append("Known violations:")
        lines.extend(f"- {violation}" for violation in violations)
    lines.extend(
        [
            "",
            "Draft response:",
            draft,
            "",
            "Schema definition:",
            DEEP_DIVE_TYPES_DEFINITION,
        ]
    )
    return "\n".join(lines)
