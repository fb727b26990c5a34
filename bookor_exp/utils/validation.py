def validate_subject_id(s: str) -> bool:
    return bool((s or "").strip())
