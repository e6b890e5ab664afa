import pytest

from mdreflow.errors import InvariantError, UnsupportedConstruct
from mdreflow.layout.directives import (
    BlankLine,
    HardBreak,
    HorizontalRule as Rule,
    Pop,
    PushPrefix,
    PushPrefixFirstLine,
    SoftBreak,
    TextRun,
)
from mdreflow.layout.lower import lower
from mdreflow.parse.tree import (
    Blockquote,
    Code,
    Emphasis,
    FencedCode,
    Header,
    HorizontalRule,
    Image,
    IndentedCode,
    LineBreak,
    Link,
    ListItem,
    OrderedList,
    Paragraph,
    Raw,
    Strong,
    Text,
    UnorderedList,
)


def para(*spans):
    return lower([Paragraph(tuple(spans))])


def test_text_breaks_after_every_clause():
    assert para(Text("Hello, world.")) == [
        TextRun("Hello,"),
        HardBreak(),
        TextRun("world."),
        BlankLine(),
        BlankLine(),
    ]


def test_clause_is_one_run_with_spaces_collapsed():
    assert para(Text("a  b\tc")) == [TextRun("a b c"), BlankLine(), BlankLine()]


def test_short_code_is_flanked_by_soft_breaks():
    assert para(Text("run "), Code("ls"), Text(" now")) == [
        TextRun("run"),
        SoftBreak(),
        TextRun("`ls`"),
        SoftBreak(),
        TextRun("now"),
        BlankLine(),
        BlankLine(),
    ]


def test_long_code_is_flanked_by_hard_breaks():
    code = "x" * 21
    assert para(Text("see "), Code(code), Text(" here")) == [
        TextRun("see"),
        HardBreak(),
        TextRun(f"`{code}`"),
        HardBreak(),
        TextRun("here"),
        BlankLine(),
        BlankLine(),
    ]


def test_code_containing_backtick_is_escaped():
    out = para(Code("a`b\\"))
    assert out[0] == TextRun("`a\\`b\\\\`")


def test_links_and_images_sit_on_their_own_line():
    assert para(Link("text", "http://x.org/a,b", "T")) == [
        HardBreak(),
        TextRun('[text](http://x.org/a,b "T")'),
        HardBreak(),
        BlankLine(),
        BlankLine(),
    ]
    assert TextRun("![alt](img.png)") in para(Image("alt", "img.png"))


def test_emphasis_and_strong_wrap_nested_spans():
    assert para(Text("a "), Emphasis((Text("b c"),)), Text(" d")) == [
        TextRun("a"),
        SoftBreak(),
        TextRun("*"),
        TextRun("b c"),
        TextRun("*"),
        SoftBreak(),
        TextRun("d"),
        BlankLine(),
        BlankLine(),
    ]
    assert para(Strong((Text("b"),)))[:3] == [TextRun("__"), TextRun("b"), TextRun("__")]


def test_explicit_line_break_keeps_backslash():
    assert para(Text("a"), LineBreak(), Text("b"))[:4] == [
        TextRun("a"),
        TextRun("\\"),
        HardBreak(),
        TextRun("b"),
    ]


def test_setext_headers_get_exact_underline():
    assert lower([Header((Text("Title"),), 1)]) == [
        TextRun("Title"),
        HardBreak(),
        TextRun("====="),
        BlankLine(),
        BlankLine(),
    ]
    out = lower([Header((Text("Hello, "), Emphasis((Text("world"),))), 2)])
    assert out[0] == TextRun("Hello, *world*")
    assert out[2] == TextRun("-" * len("Hello, *world*"))


def test_deep_headers_use_hashes():
    assert lower([Header((Text("Deep"),), 3)]) == [TextRun("### Deep"), BlankLine(), BlankLine()]


def test_header_level_zero_is_invalid():
    with pytest.raises(InvariantError):
        lower([Header((Text("x"),), 0)])


def test_blockquote_pushes_prefix():
    assert lower([Blockquote((Paragraph((Text("q"),)),))]) == [
        PushPrefix("> "),
        TextRun("q"),
        BlankLine(),
        BlankLine(),
        Pop(),
        BlankLine(),
    ]


def test_indented_code_is_verbatim():
    assert lower([IndentedCode("a, b.\n\n  c\n")]) == [
        PushPrefix("    "),
        TextRun("a, b."),
        HardBreak(),
        TextRun(""),
        HardBreak(),
        TextRun("  c"),
        HardBreak(),
        Pop(),
        BlankLine(),
    ]


def test_fenced_code_is_verbatim():
    assert lower([FencedCode("x = 1\n", "python")]) == [
        TextRun("```python"),
        HardBreak(),
        TextRun("x = 1"),
        HardBreak(),
        TextRun("```"),
        BlankLine(),
    ]


def test_ordered_list_counts_from_start():
    items = (ListItem(spans=(Text("a"),)), ListItem(spans=(Text("b"),)))
    assert lower([OrderedList(items, "3")]) == [
        PushPrefixFirstLine("3.  ", "    "),
        TextRun("a"),
        Pop(),
        HardBreak(),
        PushPrefixFirstLine("4.  ", "    "),
        TextRun("b"),
        Pop(),
        HardBreak(),
        BlankLine(),
    ]


def test_unordered_list_item_with_blocks():
    item = ListItem(blocks=(Paragraph((Text("a"),)),))
    assert lower([UnorderedList((item,))]) == [
        PushPrefixFirstLine("*   ", "    "),
        TextRun("a"),
        BlankLine(),
        BlankLine(),
        Pop(),
        HardBreak(),
        BlankLine(),
    ]


def test_horizontal_rule():
    assert lower([HorizontalRule()]) == [Rule(), BlankLine()]


def test_unsupported_constructs_abort():
    with pytest.raises(UnsupportedConstruct):
        lower([Raw("<div></div>")])
    with pytest.raises(UnsupportedConstruct):
        lower([OrderedList((ListItem(spans=(Text("a"),)),), "a")])


def test_marker_after_soft_break_stays_on_the_line():
    assert para(Emphasis((Text("a"),)), Text(" - b")) == [
        TextRun("*"),
        TextRun("a"),
        TextRun("*"),
        TextRun(" - b"),
        BlankLine(),
        BlankLine(),
    ]
    assert para(Code("c"), Text(" + d"))[:2] == [TextRun("`c`"), TextRun(" + d")]


@pytest.mark.parametrize(
    "text, escaped",
    [
        ("One, - two", "\\- two"),
        ("One, # two", "\\# two"),
        ("One, > two", "\\> two"),
        ("One, * * *", "\\* * *"),
        ("One, ``` two", "\\``` two"),
        ("Version 2. 3. Then", "3\\."),
        ("Pick: 12) twelve", "12\\) twelve"),
    ],
)
def test_marker_starting_a_clause_line_is_escaped(text, escaped):
    assert TextRun(escaped) in para(Text(text))


def test_plain_clause_lines_are_not_escaped():
    assert para(Text("One, -two; 2x"))[:5] == [
        TextRun("One,"),
        HardBreak(),
        TextRun("-two;"),
        HardBreak(),
        TextRun("2x"),
    ]


def test_header_text_is_never_escaped():
    assert lower([Header((Text("Steps: 1. go"),), 3)])[0] == TextRun("### Steps: 1. go")


def test_link_destination_and_title_are_escaped():
    assert para(Link("a", "foo)bar", None))[1] == TextRun("[a](foo\\)bar)")
    assert para(Link("a", "my file.md", None))[1] == TextRun("[a](<my file.md>)")
    assert para(Link("a", "u", 'say "hi"'))[1] == TextRun('[a](u "say \\"hi\\"")')
    assert para(Image("alt", "", None))[1] == TextRun("![alt](<>)")


def test_empty_title_is_kept():
    assert para(Link("a", "u", ""))[1] == TextRun('[a](u "")')
