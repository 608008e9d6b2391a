from html import escape
from typing import Iterable, Optional

from gapquiz.models.quiz import Question, RubyToken

GAP_HTML = '<span class="gap"></span>'


def render_ruby(tokens: Iterable[RubyToken]) -> str:
    """
    [{word, bopomo}] -> <ruby>字<rt>ㄗˋ</rt></ruby>...
    """
    return "".join(
        f"<ruby>{escape(t.word)}<rt>{escape(t.bopomo)}</rt></ruby>" for t in tokens
    )


def render_sentence(question: Question, fill: Optional[str] = None, css_class: str = "") -> str:
    """
    Phrase complète : avant + trou + après.
    Sans `fill` le trou reste vide ; sinon il affiche la réponse finale.
    """
    before, after = question.prompt_segments
    if fill is None:
        gap = GAP_HTML
    else:
        cls = f' class="{escape(css_class)}"' if css_class else ""
        gap = f'<span class="gap"><span{cls}>{escape(fill)}</span></span>'
    return f"{render_ruby(before)} {gap} {render_ruby(after)}"


def plain_sentence(question: Question, fill: str = "＿＿") -> str:
    before, after = question.prompt_segments
    return "".join(t.word for t in before) + fill + "".join(t.word for t in after)
