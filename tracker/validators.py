"""
validators.py
-------------
Input rules shared by the model layer (admin, forms) and the API serializers.
"""

MISSING_REASON = "Either a reason or free text reason is required"
BOTH_REASONS = "Provide either a reason or free text reason, not both"


def reason_choice_error(reason, free_text_reason):
    """
    Return an error message unless exactly one of the two reason inputs is set,
    otherwise None. Whitespace-only free text counts as missing.
    """
    has_reason = reason is not None and reason != ""
    has_text = bool((free_text_reason or "").strip())

    if not has_reason and not has_text:
        return MISSING_REASON
    if has_reason and has_text:
        return BOTH_REASONS
    return None
