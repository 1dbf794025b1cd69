"""
Section guide and questionnaire.

What good content looks like for each section, and the questions that gather
it. This is guidance for the author (or an assistant interviewing the
author); the renderer never checks content against these rules.

Example:
    >>> guide_for("goal").questions[0]
    'What measurable outcome tells us this work succeeded?'
"""

from dataclasses import dataclass
from typing import Any

from techspec.errors import UnknownSectionError
from techspec.schema import QUALITY_ATTRIBUTES, get_section, iter_sections


@dataclass(frozen=True)
class SectionGuide:
    """Authoring guidance for one section.

    Attributes:
        key: Section key
        purpose: One-line statement of what the section is for
        rules: What good content looks like
        questions: Questions whose answers fill the section
    """

    key: str
    purpose: str
    rules: tuple[str, ...] = ()
    questions: tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return get_section(self.key).title


SECTION_GUIDE: dict[str, SectionGuide] = {
    guide.key: guide
    for guide in (
        SectionGuide(
            "metadata",
            "Who owns the document, when it was written, and how it changed.",
            rules=(
                "Name a single owner, not a team.",
                "Bump the version and add a changelog line on every substantive revision.",
            ),
            questions=(
                "Who owns this spec?",
                "Which version of the document is this, and what changed since the last one?",
            ),
        ),
        SectionGuide(
            "problem_statement",
            "The user or business problem, independent of any solution.",
            rules=(
                "Describe who is affected and how, with evidence (tickets, data, quotes).",
                "Do not mention the proposed solution here.",
                "Keep it to one or two short paragraphs.",
            ),
            questions=(
                "What problem are we solving, and for whom?",
                "What evidence shows the problem is real?",
                "What happens if we do nothing?",
            ),
        ),
        SectionGuide(
            "goal",
            "Measurable outcomes that define success.",
            rules=(
                "Each goal is measurable: a number, a deadline, or a verifiable state.",
                "List non-goals separately if scope is easily misread.",
            ),
            questions=(
                "What measurable outcome tells us this work succeeded?",
                "By when should each outcome be reached?",
            ),
        ),
        SectionGuide(
            "proposed_solution",
            "The approach at a level a reviewer can challenge.",
            rules=(
                "Explain the approach before the details.",
                "Link to prototypes or prior art instead of restating them.",
            ),
            questions=("In two or three sentences, how will we solve the problem?",),
        ),
        SectionGuide(
            "changes",
            "The concrete changes the solution requires.",
            rules=(
                "One bullet per change, phrased as an action.",
                "Mention every affected service, screen, or job.",
            ),
            questions=("Which components, services, or screens change, and how?",),
        ),
        SectionGuide(
            "architecture_diagrams",
            "How components interact after the change. Include only if architecture changes.",
            rules=(
                "Prefer Mermaid or ASCII diagrams kept in the document over screenshots.",
                "Show the before and after when the change moves responsibilities.",
            ),
            questions=("Does the change alter how components talk to each other? Sketch the new flow.",),
        ),
        SectionGuide(
            "schema_specification",
            "Data model changes. Include only if the data model changes.",
            rules=(
                "Give exact DDL for new or altered tables.",
                "Summarize each change (add/alter/drop) with its reason and migration impact.",
            ),
            questions=(
                "Which tables or collections are added, altered, or dropped?",
                "Do existing rows need a backfill or migration?",
            ),
        ),
        SectionGuide(
            "api_specification",
            "New or changed endpoints. Include only if the API surface changes.",
            rules=(
                "One block per endpoint: method, path, auth, request, and response.",
                "Use realistic JSON examples, not type placeholders.",
            ),
            questions=(
                "Which endpoints are added or changed?",
                "How are they authenticated, and what do request and response look like?",
            ),
        ),
        SectionGuide(
            "ui_flow",
            "The user journey through changed screens. Include only if the UI changes.",
            rules=(
                "Number the steps from the user's point of view.",
                "List every affected screen.",
            ),
            questions=("Walk through the flow step by step: what does the user see and do?",),
        ),
        SectionGuide(
            "risk",
            "What could go wrong and how we limit it.",
            rules=(
                "Rate likelihood and impact (Low/Medium/High).",
                "Every risk has a mitigation or an explicit acceptance.",
            ),
            questions=(
                "What could go wrong during or after rollout?",
                "How likely is each risk, how bad would it be, and how do we mitigate it?",
            ),
        ),
        SectionGuide(
            "security_privacy",
            "Security and privacy considerations, as a checklist.",
            rules=(
                "Cover personal data, authentication, authorization, and secrets.",
                "Mark items done only when verified.",
            ),
            questions=("Does the change touch personal data, credentials, or permissions?",),
        ),
        SectionGuide(
            "alternatives",
            "Options considered and why they lost.",
            rules=(
                "Include doing nothing as an option.",
                "State the deciding reason for each rejection.",
            ),
            questions=("What other approaches did you consider, and why were they rejected?",),
        ),
        SectionGuide(
            "implementation_plan",
            "Ordered phases with their tasks and dependencies.",
            rules=(
                "Each phase is shippable on its own.",
                "Name dependencies on other teams or phases explicitly.",
            ),
            questions=(
                "How will the work be split into phases?",
                "What does each phase depend on?",
            ),
        ),
        SectionGuide(
            "metrics",
            "How success is measured after launch.",
            rules=(
                "Each metric has a precise definition and a target KPI.",
                "Say where the metric is observed (dashboard, query).",
            ),
            questions=("Which metrics will show the goals were met, and what are the targets?",),
        ),
        SectionGuide(
            "quality_attributes",
            "Non-functional requirements for the " + str(len(QUALITY_ATTRIBUTES)) + " standard attributes.",
            rules=(
                "Address each attribute: " + ", ".join(QUALITY_ATTRIBUTES) + ".",
                "Give a measurable metric where one exists; write N/A with a reason otherwise.",
            ),
            questions=tuple(
                f"What is the {name.lower()} requirement, and how is it measured?"
                for name in QUALITY_ATTRIBUTES
            ),
        ),
        SectionGuide(
            "follow_up",
            "Work deliberately left for later.",
            rules=(
                "Each item has an estimate and a tracking link.",
                "Give a target date, even a rough one.",
            ),
            questions=("What work is deferred, how big is it, and where is it tracked?",),
        ),
    )
}


def guide_for(key: str) -> SectionGuide:
    """Guidance for one section.

    Raises:
        UnknownSectionError: If the key is not in the schema
    """
    get_section(key)
    try:
        return SECTION_GUIDE[key]
    except KeyError:
        raise UnknownSectionError(key, f"No guide for section: {key!r}") from None


def questions_for(key: str) -> list[str]:
    return list(guide_for(key).questions)


def questionnaire() -> list[tuple[str, str]]:
    """All (section key, question) pairs in document order."""
    return [(spec.key, question) for spec in iter_sections() for question in questions_for(spec.key)]


def skeleton_content() -> dict[str, Any]:
    """Starter answers mapping with one placeholder per required field.

    Conditional and optional sections are left out; authors add them only
    when the change needs them.
    """
    return {
        "title": "<Feature name>",
        "metadata": {
            "owner": "<owner>",
            "version": "0.1",
            "changelog": [{"version": "0.1", "description": "Initial draft"}],
        },
        "problem_statement": "<What problem are we solving, and for whom?>",
        "goal": ["<Measurable outcome>"],
        "proposed_solution": "<The approach in two or three sentences.>",
        "changes": ["<Concrete change>"],
        "risk": [
            {"risk": "<Risk>", "likelihood": "Low", "impact": "Medium", "mitigation": "<mitigation>"},
        ],
        "alternatives": [
            {"option": "Do nothing", "pros": "No cost", "cons": "Problem persists", "rejection_reason": "<why rejected>"},
        ],
        "implementation_plan": [
            {"name": "Phase 1", "tasks": ["<Task>"], "dependencies": []},
        ],
        "metrics": [{"definition": "<Metric>", "kpi": "<Target>", "notes": ""}],
        "quality_attributes": {
            name.lower(): {"definition": "", "metric": "", "notes": ""} for name in QUALITY_ATTRIBUTES
        },
        "follow_up": [
            {"task": "<Deferred task>", "description": "", "estimate": "", "link": "", "date": ""},
        ],
    }
