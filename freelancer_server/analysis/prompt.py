"""Prompt templates for the five analysis dimensions.

Every builder is pure and never raises: absent or empty profile fields are
rendered as a fixed placeholder so the model sees an explicit "unknown".
"""

from __future__ import annotations

from freelancer_server.analysis.schemas import ProfileData

NOT_SPECIFIED = "Not specified"
NOT_PROVIDED = "Not provided"
VOICE_EXCERPT_CHARS = 200


def _or(value: str | None, placeholder: str) -> str:
    return value or placeholder


def voice_excerpt(voice_analysis: str) -> str:
    """First 200 characters of the voice tone text, followed by an ellipsis."""

    return f"{voice_analysis[:VOICE_EXCERPT_CHARS]}..."


def build_voice_tone_prompt(data: ProfileData) -> str:
    return "\n".join(
        [
            "You are an expert in LinkedIn personal branding and voice analysis.",
            "",
            "Analyze the voice tone and writing style based on these details:",
            "",
            f"**Goals:** {_or(data.goals, NOT_SPECIFIED)}",
            f"**Pain Points:** {_or(data.pain_points, NOT_SPECIFIED)}",
            "",
            "Provide a detailed analysis including:",
            "",
            "1. **Predicted Voice Tone** (Professional, Casual, Inspirational, Authoritative, etc.)",
            "2. **Key Characteristics** of their current or desired communication style",
            "3. **Emotional Undertones** that should resonate with their audience",
            "4. **Recommendations** for maintaining consistency across all content",
            "",
            "Keep the analysis concise but insightful (max 300 words).",
        ]
    )


def build_psychological_triggers_prompt(data: ProfileData) -> str:
    return "\n".join(
        [
            "You are an expert in consumer psychology and persuasion.",
            "",
            "Based on these details:",
            "",
            f"**Goals:** {_or(data.goals, NOT_SPECIFIED)}",
            f"**Pain Points:** {_or(data.pain_points, NOT_SPECIFIED)}",
            "",
            "Identify 5 psychological triggers that would be most effective:",
            "",
            "For each trigger, provide:",
            "1. **Trigger Name** (e.g., Urgency, FOMO, Authority, Social Proof, Reciprocity)",
            "2. **Why it works** for this specific audience",
            "3. **How to apply it** in LinkedIn content",
            "",
            "Be specific and actionable (max 400 words).",
        ]
    )


def build_content_strategy_prompt(data: ProfileData, voice_analysis: str) -> str:
    return "\n".join(
        [
            "You are a LinkedIn content strategist.",
            "",
            "Based on:",
            f"- **Goals:** {_or(data.goals, NOT_SPECIFIED)}",
            f"- **Pain Points:** {_or(data.pain_points, NOT_SPECIFIED)}",
            f"- **Voice Tone Analysis:** {voice_excerpt(voice_analysis)}",
            "",
            "Generate a content strategy with:",
            "",
            "1. **Content Pillars** (3-4 main themes to focus on)",
            "2. **10 Specific Post Ideas** aligned with the voice and goals",
            "3. **Posting Frequency Recommendation**",
            "4. **Engagement Strategy** tips",
            "",
            "Make it actionable and tailored to their specific situation (max 600 words).",
        ]
    )


def build_profile_optimization_prompt(data: ProfileData) -> str:
    return "\n".join(
        [
            "You are a LinkedIn profile optimization expert.",
            "",
            "Based on:",
            f"- **Goals:** {_or(data.goals, NOT_SPECIFIED)}",
            f"- **Pain Points:** {_or(data.pain_points, NOT_SPECIFIED)}",
            f"- **LinkedIn URL:** {_or(data.linkedin_url, NOT_PROVIDED)}",
            "",
            "Provide specific recommendations for:",
            "",
            "1. **Headline Optimization** - 3 headline options that attract the right audience",
            "2. **About Section** - Key elements to include for maximum impact",
            "3. **Featured Section** - What to showcase",
            "4. **Experience Section** - How to frame achievements",
            "5. **Skills & Endorsements** - Top skills to highlight",
            "",
            "Be specific and actionable (max 500 words).",
        ]
    )


def build_competitor_insights_prompt(data: ProfileData) -> str:
    return "\n".join(
        [
            "You are a competitive intelligence analyst for LinkedIn.",
            "",
            f'Based on the goals: "{_or(data.goals, NOT_SPECIFIED)}"',
            "",
            "Provide insights on:",
            "",
            "1. **Common Patterns** successful profiles in this niche use",
            "2. **Content Types** that get the most engagement",
            "3. **Positioning Strategies** that differentiate top performers",
            "4. **Gaps & Opportunities** to stand out from competitors",
            "5. **Action Items** to implement immediately",
            "",
            "Be strategic and specific (max 400 words).",
        ]
    )
