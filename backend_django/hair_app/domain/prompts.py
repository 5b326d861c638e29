from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from .analysis import UserAnswers

NO_HAIR_PHOTOS_TEXT = 'No hair photos provided for analysis.'
PRODUCT_PLACEHOLDER_TEXT = 'Product image uploaded successfully. Analysis skipped to avoid API errors.'
CHAT_FALLBACK_REPLY = (
    'I apologize, but I had trouble generating a response. '
    'Please try asking your question again.'
)

_TEMPLATE = (
    "Based on both the images AND this user information, provide a HIGHLY PERSONALIZED analysis. "
    "Provide the following sections formatted exactly as specified using Markdown:\n\n"
    "**AI Description**\n"
    "Provide a detailed, personalized description of the hair, addressing the user's specific concerns. "
    "Include hair type (e.g., straight, wavy, curly, coily), quality (e.g., healthy, dry, damaged), "
    "visible damage (e.g., split ends, breakage), color, and estimated thickness (e.g., fine, medium, thick). "
    "Make direct connections to the user's stated concerns and conditions.\n\n"
    "**Hair Care Routine**\n"
    "Suggest a detailed, personalized hair care routine specifically tailored to address the user's hair "
    "concerns, considering their allergies, medications, and current washing habits. "
    "Format this as a numbered list with clear section headers:\n\n"
    "1. **Cleansing:** Specific recommendations for washing hair that address the user's unique needs\n"
    "2. **Conditioning:** Specific recommendations for conditioning\n"
    "3. **Treatments:** Specific recommendations for treatments like masks or oils\n"
    "4. **Styling:** Specific recommendations for styling and heat protection\n\n"
    "**Daily/Weekly Hair Care Schedule**\n"
    "Provide a comprehensive, step-by-step schedule that shows exactly when and how to use each recommended "
    "product or technique. Include specific instructions, timing, and frequency. Format as follows:\n\n"
    "**DAILY ROUTINE:**\n"
    "Morning:\n"
    "• Step 1: [Specific action with detailed instructions]\n"
    "• Step 2: [Next specific action with instructions]\n"
    "• Step 3: [Continue with styling steps]\n\n"
    "Evening:\n"
    "• Step 1: [Evening routine steps if applicable]\n"
    "• Step 2: [Additional evening care]\n\n"
    "**WEEKLY ROUTINE:**\n"
    "Wash Days (specify frequency - e.g., 2-3 times per week):\n"
    "• Step 1: [Pre-wash treatment if needed]\n"
    "• Step 2: [Shampooing instructions]\n"
    "• Step 3: [Conditioning instructions]\n"
    "• Step 4: [Post-wash care]\n\n"
    "Weekly Treatments:\n"
    "• Deep Conditioning: [Specific instructions and frequency]\n"
    "• Scalp Care: [Scalp treatment instructions if needed]\n"
    "• Special Treatments: [Any additional weekly treatments]\n\n"
    "**Product Suggestions**\n"
    "Recommend specific types of hair care products that directly address the user's unique hair concerns, "
    "allergies, and conditions. Be specific about ingredients to look for or avoid based on their needs. "
    "Format as a bulleted list:\n"
    "- [Specific shampoo type with ingredients beneficial for their condition]\n"
    "- [Specific conditioner type with ingredients beneficial for their condition]\n"
    "- [Specific treatment product with ingredients beneficial for their condition]\n\n"
    "**AI Bonus Tips**\n"
    "Provide 3-5 additional personalized hair care tips or insights specifically for this user's hair type, "
    "concerns, and lifestyle. Include advice on diet, environmental factors, or techniques that would "
    "specifically benefit their situation. Format as a numbered list:\n"
    "1. [First personalized tip addressing their specific concerns]\n"
    "2. [Second personalized tip addressing their specific concerns]\n"
    "3. [Third personalized tip addressing their specific concerns]"
)


def build_hair_analysis_prompt(answers: UserAnswers) -> str:
    """Prompt sent together with every hair photo in a single vision call."""
    return (
        "Analyze these images of hair to provide a highly personalized and detailed hair analysis. "
        "The user has provided the following information:\n\n"
        f"- Main hair concern: {answers.hair_problem or 'Not specified'}\n"
        f"- Allergies: {answers.allergies or 'None'}\n"
        f"- Medications: {answers.medication or 'None'}\n"
        f"- Hair dyed: {answers.dyed or 'Not specified'}\n"
        f"- Wash frequency: {answers.wash_frequency or 'Not specified'}\n\n"
        + _TEMPLATE
    )


def build_chat_prompt(
    message: str,
    analysis: Optional[Dict[str, Any]] = None,
    submission: Optional[Dict[str, Any]] = None,
    history: Iterable[Dict[str, Any]] = (),
    history_window: int = 3,
) -> str:
    """Context prompt for the hair analyst chat.

    ``analysis`` uses the stored camelCase analysis shape, ``submission`` the
    questionnaire field names sent by the frontend. Only the last
    ``history_window`` messages are replayed.
    """
    lines = [
        "You are an expert AI Hair Analyst providing personalized advice. You have access to the "
        "user's detailed hair analysis and questionnaire responses.",
        "",
        "USER'S HAIR ANALYSIS CONTEXT:",
    ]
    if analysis:
        if analysis.get('detailedAnalysis'):
            lines.append(f"Hair Analysis: {analysis['detailedAnalysis']}")
        metrics = analysis.get('metrics')
        if isinstance(metrics, dict) and metrics:
            lines.append(
                f"Hair Metrics - Moisture: {metrics.get('moisture')}%, Strength: {metrics.get('strength')}%, "
                f"Elasticity: {metrics.get('elasticity')}%, Scalp Health: {metrics.get('scalpHealth')}%"
            )
        routine = analysis.get('haircareRoutine')
        if isinstance(routine, dict) and routine:
            lines.append(
                f"Recommended Routine - Cleansing: {routine.get('cleansing')}, "
                f"Conditioning: {routine.get('conditioning')}, Treatments: {routine.get('treatments')}, "
                f"Styling: {routine.get('styling')}"
            )
        products = analysis.get('productSuggestions')
        if isinstance(products, list) and products:
            lines.append(f"Product Suggestions: {', '.join(str(p) for p in products)}")
    if submission:
        lines.append(f"User's Concerns: {submission.get('hairProblem') or 'Not specified'}")
        lines.append(f"Allergies: {submission.get('allergies') or 'None mentioned'}")
        lines.append(f"Medications: {submission.get('medication') or 'None mentioned'}")
        lines.append(f"Hair Dyed: {submission.get('dyed') or 'Not specified'}")
        lines.append(f"Wash Frequency: {submission.get('washFrequency') or 'Not specified'}")
        if submission.get('additionalConcerns'):
            lines.append(f"Additional Concerns: {submission['additionalConcerns']}")

    lines += [
        "",
        "INSTRUCTIONS:",
        "- Provide personalized, specific advice based on the user's analysis",
        "- Reference their specific metrics, concerns, and hair condition when relevant",
        "- Be conversational, friendly, and encouraging",
        "- Keep responses focused and actionable",
        "- If asked about products, suggest types/ingredients rather than specific brands",
        "- Always relate advice back to their specific hair analysis",
        "",
        "CHAT HISTORY:",
    ]
    recent = list(history)[-history_window:] if history_window > 0 else []
    for msg in recent:
        speaker = 'User' if msg.get('role') == 'user' else 'AI'
        lines.append(f"{speaker}: {msg.get('content', '')}")

    lines += [
        "",
        f"User's current question: {message}",
        "",
        "Please provide a helpful, personalized response based on their hair analysis:",
    ]
    return "\n".join(lines)
