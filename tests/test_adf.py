from jiracli.adf import document_text, paragraph_document


def test_paragraph_document_wraps_text():
    doc = paragraph_document("  Steps to reproduce  ")
    assert doc == {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": "Steps to reproduce"}],
            }
        ],
    }


def test_blank_description_has_no_document():
    assert paragraph_document("") is None
    assert paragraph_document("   ") is None
    assert paragraph_document(None) is None


def test_document_text_flattens_blocks():
    doc = {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "First"}]},
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Second"},
                    {"type": "hardBreak"},
                    {"type": "text", "text": "line"},
                ],
            },
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [{"type": "text", "text": "item"}],
                    }
                ],
            },
        ],
    }
    assert document_text(doc) == "First\nSecond\nline\nitem"


def test_document_text_passthrough():
    assert document_text(None) == ""
    assert document_text("plain") == "plain"
