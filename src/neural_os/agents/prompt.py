"""
Micro-app Generation Prompts
System prompt and response shape for building apps from a chat request.
"""

# ============================================================================
# Block and Action Documentation
# ============================================================================

BLOCK_DOCUMENTATION = """
=== BLOCKS ===

Every block is a flat JSON object with a "type" and optional properties:
label, text, icon, variant, value_key, items_key, state_key, action, payload,
children (containers only).

LAYOUT:
- Card: vertical container (children)
- Row: horizontal container (children)

DISPLAY:
- H1: heading (text)
- Text: paragraph (text; value_key shows a data value)
- Stat: big number bound to value_key (label, icon)
- Timer: countdown display bound to value_key
- Icon: icon by name (icon)

INTERACTION:
- Btn / BtnSec: primary / secondary button (label, action, payload)
- ButtonRow: row of buttons (actions: [{label, action, payload}, ...])
- Toggle: switch bound to state_key
- Input: text entry (id, placeholder); read from payloads as "$INPUT:<id>"
- Select: dropdown (id, label, options: [...]); read as "$INPUT:<id>"

LISTS:
- Checklist: checkable items bound to items_key
- DataList: ledger rows bound to items_key; a "category" field shows as a badge
"""

ACTION_DOCUMENTATION = """
=== ACTIONS ===

Buttons run these operations locally. payload.key names the data field.

- INCREMENT_COUNT {key, amount}        add amount (default 1)
- SET_VALUE {key, value}               overwrite a field
- TOGGLE_STATE {key}                   flip a boolean
- START_TIMER / STOP_TIMER             run or pause a countdown
- RESET_TIMER {key, initialValue}      stop and set the countdown
- ADD_LIST_ITEM {key, value} or {key, item: {...}}
- TOGGLE_LIST_ITEM {key, index}
- DELETE_LIST_ITEM {key, index}
- EDIT_LIST_ITEM {key, index, value}

Use "$INPUT:<id>" as any value to take what the user typed into Input <id>.
"""

DESIGN_RULES = """
=== DESIGN RULES ===

1. Anticipate structure: a "planner" implies categories and statuses. Any field
   with a finite set of options is a Select, never a free text box.
2. Single ledger: keep records in ONE list (e.g. "log") and tell kinds apart
   with a "category" field instead of creating parallel lists.
3. Every key referenced by a block must exist in initial_state.
4. Timers (archetype Regulator) keep seconds in a number field plus
   "is_running" and "finished" booleans.
"""

RESPONSE_FORMAT = """
=== RESPONSE FORMAT ===

Output ONLY one JSON object, no markdown:
{
  "tool_name": "Laundry Timer",
  "archetype": "Accumulator" | "Regulator" | "Checklist" | "Drafter",
  "initial_state": {"time": 1800, "is_running": false, "finished": false},
  "blueprint": [ ...blocks... ],
  "message": "One sentence for the chat."
}

To answer without building anything, return only {"message": "..."}.
"""

# Advisory response shape, for providers that accept a JSON schema
RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "tool_name": {"type": "string"},
        "archetype": {"type": "string", "enum": ["Accumulator", "Regulator", "Checklist", "Drafter"]},
        "initial_state": {"type": "object"},
        "blueprint": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string"},
                    "label": {"type": "string"},
                    "value_key": {"type": "string"},
                    "items_key": {"type": "string"},
                    "state_key": {"type": "string"},
                    "action": {"type": "string"},
                    "payload": {
                        "type": "object",
                        "properties": {
                            "key": {"type": "string"},
                            "amount": {"type": "number"},
                            "value": {"type": "string"},
                            "index": {"type": "number"},
                            "initialValue": {"type": "number"},
                        },
                    },
                },
            },
        },
        "message": {"type": "string"},
    },
    "required": ["tool_name", "archetype", "blueprint", "initial_state"],
}


SYSTEM_PROMPT = f"""You are the architect of a personal micro-app OS.
Turn the user's request into a small working app made only of the blocks below.
{BLOCK_DOCUMENTATION}
{ACTION_DOCUMENTATION}
{DESIGN_RULES}
{RESPONSE_FORMAT}"""


def get_build_prompt(request: str, app_context: str = "") -> str:
    """
    Build the full prompt for one chat request.

    Args:
        request: The user's message
        app_context: JSON of the app being edited (optional)

    Returns:
        Complete prompt text
    """
    parts = [SYSTEM_PROMPT]
    if app_context:
        parts.append(
            "=== CURRENT APP ===\n"
            "Update this app. Keep its data unless the request changes it.\n"
            f"{app_context}"
        )
    parts.append(f"=== REQUEST ===\n{request}\n\nRespond with JSON:")
    return "\n\n".join(parts)
