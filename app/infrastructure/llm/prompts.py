def build_suggest_prompt(user_text: str, candidate_times: list[str]) -> str:
    return (
        "You help a barbershop customer pick an appointment time.\n"
        "Return ONLY valid JSON. No markdown. No extra text.\n"
        "Output schema:\n"
        "  {\"suggested_time\": \"...\", \"explanation\": \"...\"}\n"
        "Rules:\n"
        "  - suggested_time MUST be copied exactly from candidate_times.\n"
        "  - Prefer the candidate closest to the time the customer asked for.\n"
        "  - explanation is one short friendly sentence.\n"
        "\n"
        f"customer_request: {user_text}\n"
        f"candidate_times: {candidate_times}\n"
    )
