"""翻訳に使うプロンプト定義。"""

from __future__ import annotations

PLAIN_TRANSLATION_INSTRUCTIONS = (
    "Translate the Korean text into clear, concise English.",
    "Return ONLY the translation text.",
    "Do NOT add any introductions, notes, markdown, or code fences.",
    "Preserve paragraph breaks.",
)

HTML_TRANSLATION_INSTRUCTIONS = (
    "Translate the following HTML email content into clear, concise English.",
    "Preserve ALL HTML tags, attributes, links, classes, and inline styles.",
    "Translate ONLY human-readable text nodes. Do not remove or add elements.",
    "Return only the translated HTML without any extra commentary or markdown.",
)

_TEACHING_ROLE = (
    "You are a native English teacher helping the user study English.",
    "The user uploads one or more Korean news articles (short paragraphs). "
    "Convert each article into natural English, matching its tone and style.",
    "After each translated article, add two sections: Vocabulary (intermediate level "
    "or above; provide English-English definition and IPA pronunciation) and "
    "Sentence Patterns (important structures from the article).",
    'Translate proper nouns: "뉴닉" -> "Newneek", "뉴니커" -> "Newneekers".',
    "Keep the original article order: article → Vocabulary → Sentence Patterns → "
    "next article → Vocabulary → Sentence Patterns → ...",
)

_TEACHING_SECTION_TEMPLATE = (
    '<section class="article">',
    '  <h2 class="article-title">[English title or topic]</h2>',
    '  <div class="article-body">[Translated article in English with paragraphs]</div>',
    "  <h3>Vocabulary</h3>",
    '  <ul class="vocab-list">',
    '    <li><span class="word">word</span> <span class="ipa">/ˈwɜːd/</span> — '
    '<span class="def">English definition</span></li>',
    "  </ul>",
    "  <h3>Sentence Patterns</h3>",
    '  <ul class="patterns">',
    '    <li><span class="pattern">pattern</span> — <span class="ex">Example sentence</span></li>',
    "  </ul>",
    "</section>",
)

TEACHING_INSTRUCTIONS = (
    *_TEACHING_ROLE,
    "Output strictly HTML only (no markdown, no explanations). "
    "Use this structure for each article:",
    *_TEACHING_SECTION_TEMPLATE,
    "Return only the HTML fragment (no wrapper text).",
)

END_TO_END_INSTRUCTIONS = (
    *_TEACHING_ROLE,
    "You receive a complete Korean HTML newsletter. Return the COMPLETE document in "
    "English: keep the <html>, <head> and <body> structure, every tag, attribute, "
    "link, class and inline style, and translate only human-readable text nodes.",
    "Insert the Vocabulary and Sentence Patterns study sections at the very top of "
    "<body>, one block per article, using this structure:",
    *_TEACHING_SECTION_TEMPLATE,
    "Do not leave any Korean text in the output.",
    "Return only the HTML document, starting with <html> (no markdown, no commentary).",
)


def _join(instructions: tuple[str, ...], source: str) -> str:
    return "\n".join([*instructions, "", source])


def build_plain_prompt(text: str) -> str:
    return _join(PLAIN_TRANSLATION_INSTRUCTIONS, text)


def build_html_prompt(html: str) -> str:
    return _join(HTML_TRANSLATION_INSTRUCTIONS, html)


def build_teaching_prompt(text: str) -> str:
    return _join(TEACHING_INSTRUCTIONS, text)


def build_end_to_end_prompt(html: str) -> str:
    return _join(END_TO_END_INSTRUCTIONS, html)
