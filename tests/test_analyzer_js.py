from __future__ import annotations

import pytest

from baseline.analyzer.js import ImportContext, analyze_js, strip_theme_tokens, template_to_css
from baseline.util.js import parse_source

STYLED_SOURCE = """import styled from 'styled-components';

export const Button = styled.button`
  display: grid;
  color: ${(p) => p.color};
`;
"""

EMOTION_SOURCE = """/** @jsxImportSource @emotion/react */
import { css } from '@emotion/react';

export const Card = () => (
  <div css={{ display: 'flex', padding: 8 }}>
    <span css={css`position: sticky;`} />
  </div>
);
"""

STITCHES_SOURCE = """import { styled, css, globalCss } from '@stitches/react';

const Button = styled('button', {
  backgroundColor: '$primary',
  display: 'inline-flex',
  variants: { size: { small: { padding: 4 } } },
});
const card = css({ color: '$gray500', padding: 4 });
const globals = globalCss({ ':root': { colorScheme: 'light dark' } });
"""


def _summary(result):
    return [(fragment.origin, fragment.pattern) for fragment in result.extracted_styles]


def test_template_to_css_replaces_interpolations() -> None:
    parsed = parse_source("`a: ${x}; b: ${y};`")
    (node,) = parsed.find_all("template_string")
    assert template_to_css(parsed.template(node)) == "a: /* dynamic */; b: /* dynamic */;"


def test_strip_theme_tokens_is_recursive() -> None:
    assert strip_theme_tokens({"color": "$red", "&:hover": {"color": "$blue", "margin": 0}}) == {
        "&:hover": {"margin": 0}
    }


def test_import_context_prefers_the_imported_library() -> None:
    imports = ImportContext(["styled-components/macro"])

    assert imports.uses("styled-components")
    assert not imports.uses("emotion")
    assert imports.prefer("emotion", "styled-components") == "styled-components"
    assert ImportContext([]).prefer("emotion", "styled-components") == "emotion"


def test_styled_component_with_interpolation() -> None:
    result = analyze_js(STYLED_SOURCE, "Button.tsx")

    (fragment,) = result.extracted_styles
    assert fragment.origin == "styled-components"
    assert fragment.pattern == "styled"
    assert fragment.css_text == "\n  display: grid;\n  color: /* dynamic */;\n"
    assert fragment.interpolations == 1
    assert fragment.location is not None
    assert fragment.location.line == 3
    assert result.errors == [
        "Button.tsx:3: 1 dynamic value in styled-components 'styled' not evaluated "
        "(replaced with /* dynamic */)"
    ]


def test_ignore_interpolations_hides_the_advisory() -> None:
    result = analyze_js(STYLED_SOURCE, "Button.tsx", ignore_interpolations=True)

    assert len(result.extracted_styles) == 1
    assert result.errors == []


def test_library_filter_drops_other_origins() -> None:
    result = analyze_js(STYLED_SOURCE, "Button.tsx", libraries=("emotion",))

    assert result.extracted_styles == []
    assert result.errors == []


def test_emotion_css_prop_object_and_template_are_extracted_once() -> None:
    result = analyze_js(EMOTION_SOURCE, "Card.jsx")

    assert _summary(result) == [
        ("emotion", "css-prop-object"),
        ("emotion", "css-prop-template"),
    ]
    assert result.extracted_styles[0].css_text == "display: flex;\npadding: 8px;"
    assert result.extracted_styles[1].css_text == "position: sticky;"
    assert result.errors == []


def test_stitches_objects_drop_variants_and_theme_tokens() -> None:
    result = analyze_js(STITCHES_SOURCE, "Button.ts", jsx=False)

    assert _summary(result) == [
        ("stitches", "styled"),
        ("stitches", "css"),
        ("stitches", "globalCss"),
    ]
    button, card, globals_ = result.extracted_styles
    assert button.css_text == "display: inline-flex;"
    assert button.has_variants is True
    assert card.css_text == "padding: 4px;"
    assert card.has_variants is False
    assert globals_.css_text == ":root {\n  color-scheme: light dark;\n}"


def test_css_helper_follows_imports() -> None:
    source = "import { css, keyframes } from 'styled-components';\nconst m = css`gap: 1rem;`;\n"

    assert _summary(analyze_js(source, "mixins.js")) == [("styled-components", "css")]
    assert _summary(analyze_js("const m = css`gap: 1rem;`;", "mixins.js")) == [("emotion", "css")]


def test_vue_styled_components_and_pinceau() -> None:
    vsc = "import styled from 'vue-styled-components';\nconst B = styled.button`color: red;`;"
    pinceau = "import { styled } from 'pinceau';\nconst B = styled('button', { color: 'red' });"

    assert _summary(analyze_js(vsc, "B.js")) == [("vue-styled-components", "styled")]
    assert _summary(analyze_js(pinceau, "B.js")) == [("pinceau", "styled")]


def test_nested_css_in_template_expression() -> None:
    source = (
        "const Title = styled.h1`\n"
        "  ${({ big }) => big && css`font-size: clamp(1rem, 2vw, 3rem);`}\n"
        "`;\n"
    )

    result = analyze_js(source, "Title.jsx", ignore_interpolations=True)

    assert _summary(result) == [("styled-components", "styled"), ("emotion", "css")]
    assert result.extracted_styles[1].css_text == "font-size: clamp(1rem, 2vw, 3rem);"


def test_styled_wrapping_component_and_attrs() -> None:
    source = (
        "import styled from 'styled-components';\n"
        "const A = styled(Link)`display: flex;`;\n"
        "const B = styled.input.attrs({ type: 'text' })`position: sticky;`;\n"
        "const G = createGlobalStyle`body { margin: 0; }`;\n"
    )

    assert _summary(analyze_js(source, "a.js")) == [
        ("styled-components", "styled"),
        ("styled-components", "styled"),
        ("styled-components", "createGlobalStyle"),
    ]


def test_typescript_type_arguments() -> None:
    source = (
        "import styled from '@emotion/styled';\n"
        "const Box = styled.div<{ active: boolean }>`\n  display: flex;\n`;\n"
    )

    result = analyze_js(source, "Box.ts", jsx=False)

    assert _summary(result) == [("emotion", "styled")]


def test_blank_templates_are_skipped() -> None:
    assert analyze_js("const A = styled.div`   `;", "a.js").extracted_styles == []


def test_member_calls_are_not_roots() -> None:
    assert analyze_js("const a = theme.css`color: red;`;", "a.js").extracted_styles == []


def test_syntax_error_becomes_a_single_error() -> None:
    result = analyze_js("const a = styled.div`display: grid;", "Broken.jsx")

    assert result.extracted_styles == []
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Failed to parse Broken.jsx: ")


def test_generic_arrow_function_does_not_hide_styles() -> None:
    source = "const f = <T,>(x: T) => x;\nconst B = styled.div`display: grid;`;\n"

    result = analyze_js(source, "generic.tsx")

    assert _summary(result) == [("styled-components", "styled")]
    assert result.extracted_styles[0].location.line == 2
    assert result.errors == []


def test_malformed_number_becomes_an_error() -> None:
    result = analyze_js("const n = 0x_;\nconst B = styled.div`display: grid;`;", "n.ts")

    assert result.extracted_styles == []
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Failed to parse n.ts: ")


@pytest.mark.parametrize("escape", ["\\u{110000}", "\\u{FFFFFFFF}"])
def test_out_of_range_escapes_become_errors(escape: str) -> None:
    source = f"const a = css({{ content: '{escape}', display: 'grid' }});"

    result = analyze_js(source, "escape.ts", jsx=False)

    assert result.extracted_styles == []
    assert result.errors == [
        "Failed to parse escape.ts: Code point out of bounds (1:25)"
    ]


def test_unused_strings_are_not_decoded() -> None:
    result = analyze_js('const s = "\\u{110000}";', "x.ts")

    assert result.extracted_styles == []
    assert result.errors == []


def test_non_nesting_flavors_drop_nested_objects() -> None:
    source = (
        "import { styled } from 'pinceau';\n"
        "const B = styled('button', { color: 'red', '&:hover': { color: 'blue' } });\n"
    )

    (fragment,) = analyze_js(source, "B.js").extracted_styles

    assert fragment.origin == "pinceau"
    assert fragment.css_text == "color: red;"


def test_emotion_objects_keep_nested_selectors() -> None:
    source = "const a = css({ color: 'red', '&:hover': { color: 'blue' } });"

    (fragment,) = analyze_js(source, "a.js").extracted_styles

    assert fragment.origin == "emotion"
    assert fragment.css_text == "color: red;\n&:hover {\n  color: blue;\n}"
