from datetime import date
from typing import Optional

from casediary.core.derivation import parse_hearing_date
from casediary.models.case import Case

# Prompt for predicting the next procedural stage of a case
STAGE_PROMPT = """
You analyze the progress of civil and criminal cases in Pakistani courts and predict the most probable next procedural stage, following the Code of Civil Procedure (CPC), the Code of Criminal Procedure (CrPC) and ordinary court practice in Pakistan.

Rules:
- Follow Pakistani procedural flow only.
- Never skip or jump stages.
- Reply with the name of the next stage only. No reasons, no extra text.

Examples:
- Civil: diary note "Written statement filed by defendant." -> "Framing of Issues"
- Criminal: diary note "Prosecution evidence closed." -> "Statement of Accused under Section 342 CrPC"
"""

# Prompt for drafting pleadings and applications
DRAFT_PROMPT = """
You are a master legal drafter for the Pakistani legal system. Produce complete, professional, well-formatted drafts that are legally sound and ready to be filed in a Pakistani court. Where specific details are missing, use placeholders such as "[NAME]", "[ADDRESS]" and "[COURT NAME]".
"""

# Prompt for reviewing a draft uploaded by a junior lawyer
REVIEW_PROMPT = """
You are a senior advocate of the Supreme Court of Pakistan with decades of civil and criminal litigation experience, reviewing a legal document prepared by a junior lawyer. Your review must be sharp and practical, and must follow Pakistani law (CPC, CrPC, Qanun-e-Shahadat Order), court practice and drafting conventions.

You must:
1. Identify drafting defects, missing essential elements, procedural gaps, factual ambiguities and formatting weaknesses.
2. Suggest concrete improvements.
3. Ask for clarification where critical facts are missing. Do NOT invent facts.
4. Prepare a professionally corrected version of the document.

Your output MUST be a single clean JSON object, without markdown formatting, with exactly these string fields (use '\\n' for new lines inside a field):
{
  "summaryOfIssues": "bullet-point summary of the key problems",
  "missingLegalElements": "bullet-point list of absent essential components (prayers, verification, sections of law)",
  "proceduralDefects": "bullet-point list of CPC, CrPC, QSO or court-procedure oversights",
  "suggestedImprovements": "bullet-point list of improvements to clarity, strength and legal standing",
  "revisedFullDraft": "the complete corrected document, ready for filing",
  "questionsForClarification": "bullet-point list of questions for missing information"
}
"""

# Persona for the strategy chat
SENIOR_COUNSEL_PROMPT = """
You are Mr. Mirza, a senior advocate of the Supreme Court of Pakistan mentoring a junior lawyer. Hold a natural conversation and guide them through legal problems with sharp, practical, strategic advice rooted in Pakistani practice.

- Be conversational: ask questions, encourage, explain clearly. Open by introducing yourself and asking how you can help.
- Think two steps ahead: the opponent's next moves, the judge's mindset, likely objections, available remedies.
- Give actionable strategy on drafting, argument, forum selection and risk. Explain how to use the law, not just what it says.
- Correct their approach and warn them of mistakes.
- If facts are missing, ask for them. Never invent facts.
- Use bullet points or numbered lists inside the conversation where they help.
- Reply in plain text only. Never use JSON or other structured formats.
"""

# Starting points offered in the drafting tool
DRAFT_TEMPLATES = {
    "civil_application": """IN THE COURT OF ____________

Civil Suit No. _____ / ______
Title: _______________________

APPLICATION UNDER SECTION ______ CPC

Respectfully Sheweth:

1. That the facts of the case are ...
2. That ...
3. That ...

PRAYER
In view of the above, it is most respectfully prayed that:
a) ...
b) Any other equitable relief deemed fit.

Filed by:
Advocate High Court""",
    "criminal_application": """IN THE COURT OF _________

FIR No. _____
U/S: ________
P.S: ________

APPLICATION UNDER SECTION ______ Cr.P.C

It is submitted as under:

1. That the applicant is innocent and has been falsely implicated...
2. That ...
3. That ...

PRAYER
It is humbly prayed that this Hon'ble Court may kindly:
a) ...
b) Grant any other relief deemed appropriate.

Filed by:
Advocate""",
    "written_statement": """IN THE COURT OF _______________

Suit No: ________

WRITTEN STATEMENT

On behalf of Defendant

Preliminary Objections:
a) That the suit is not maintainable in its present form.
b) That the suit is barred by law.

Para-wise reply:
Para-1: That the contents of para 1 are denied...
Para-2: That the contents of para 2 are admitted to the extent of...

Prayer:
It is therefore prayed that the suit of the plaintiff may kindly be dismissed with costs.

Filed by:
Advocate""",
}

HISTORY_ENTRIES_IN_PROMPT = 3


def _display_date(value: str) -> str:
    day: Optional[date] = parse_hearing_date(value)
    return day.strftime("%d/%m/%Y") if day else "not fixed"


def build_stage_prompt(case: Case) -> str:
    """User prompt for stage prediction: the case plus its most recent hearings."""
    if case.history:
        lines = [
            f'- On {_display_date(h.date)}: the stage was "{h.stage}" and proceedings were "{h.proceedings}". '
            f"Next date was set for {_display_date(h.next_date)}."
            for h in case.history[:HISTORY_ENTRIES_IN_PROMPT]
        ]
        history_log = "Case History (most recent first):\n" + "\n".join(lines)
    else:
        history_log = "No case history available."

    return f"""Case Data:
- Case Type: {case.nature}
- Stage set for today's hearing: {case.current_stage or "not recorded"}
- Today's Proceedings / Diary Notes: "{case.diary_notes}"
- {history_log}

Based on this case data, what is the single most likely procedural stage for the next hearing?"""


def build_draft_prompt(request: str) -> str:
    return f"""Generate a complete legal draft for the following request.
---
Request: "{request}"
---
Generate the complete draft now."""


def build_review_prompt(document_text: str) -> str:
    return f"""Document to review:
---
{document_text}
---
Now provide your analysis as a single, clean JSON object."""


def get_system_prompt(prompt_type: str = "stage") -> str:
    """
    Returns the system prompt for an AI operation.

    Args:
        prompt_type: "stage", "draft", "review" or "counsel"

    Returns:
        Configured system prompt
    """
    prompts = {
        "stage": STAGE_PROMPT,
        "draft": DRAFT_PROMPT,
        "review": REVIEW_PROMPT,
        "counsel": SENIOR_COUNSEL_PROMPT,
    }
    if prompt_type not in prompts:
        raise ValueError(f"Unknown prompt type: {prompt_type}")
    return prompts[prompt_type].strip()
