from legal_office.services.content_formatter import format_legal_content


def test_blocks_are_classified_in_order():
    text = "\n".join([
        "مذكرة بدفاع المدعى عليه",
        "",
        "الوقائع: تتلخص في الآتي",
        "- أبرم الطرفان عقداً",
        "• أخل المدعي بالتزامه",
        "المادة 157 من القانون المدني",
        "تحذير من فوات ميعاد الطعن",
        "نص عادي",
    ])

    assert format_legal_content(text) == [
        {"type": "title", "content": "مذكرة بدفاع المدعى عليه", "items": []},
        {"type": "section", "content": "الوقائع:تتلخص في الآتي", "items": ["أبرم الطرفان عقداً", "أخل المدعي بالتزامه"]},
        {"type": "article", "content": "المادة 157 من القانون المدني", "items": []},
        {"type": "warning", "content": "تحذير من فوات ميعاد الطعن", "items": []},
        {"type": "text", "content": "نص عادي", "items": []},
    ]


def test_section_is_closed_by_the_next_heading():
    blocks = format_legal_content("الطلبات:\n- رفض الدعوى\nالأسباب:\n- انعدام الصفة")
    assert [(b["content"], b["items"]) for b in blocks] == [
        ("الطلبات:", ["رفض الدعوى"]),
        ("الأسباب:", ["انعدام الصفة"]),
    ]


def test_bullet_without_section_is_text():
    assert format_legal_content("- بند منفرد") == [{"type": "text", "content": "بند منفرد", "items": []}]


def test_empty_input():
    assert format_legal_content("") == []
    assert format_legal_content(None) == []
    assert format_legal_content("\n   \n") == []
