"""Prompt builders for CCTV footage analysis and follow-up questions."""


def build_system_prompt() -> str:
    """Return the system prompt shared by analysis and chat requests."""
    return (
        "You are a careful CCTV footage analyst. "
        "Report only what is visible or audible in the recording and avoid speculation "
        "about identities or intent."
    )


def build_analysis_prompt() -> str:
    """Return the fixed extraction instruction for a full analysis."""
    return (
        "Analyze this CCTV footage comprehensively. Extract the following information:\n"
        "1. Total count of distinct people appearing.\n"
        "2. A list of specific actions/behaviors with rough timestamps "
        '(e.g. "0:02: Man enters through door"), each rated low, medium, or high intensity.\n'
        '3. Descriptions of clothing or physical attributes (e.g. "Person in yellow jacket").\n'
        '4. Any notable objects (e.g. "Red backpack", "White SUV").\n'
        "5. A brief transcription of any significant audio or speech "
        "(an empty string when there is none).\n\n"
        "Return the result as a JSON object matching this schema."
    )


def build_chat_preamble() -> str:
    """Return the framing sent alongside the media on every chat turn."""
    return "This is a CCTV recording for analysis. Use it to answer the following questions accurately."
