"""Pytest configuration and fixtures."""

import pytest

from gettables.models import Table
from gettables.pipeline.dispatch import RawRow
from gettables.pipeline.stage_read import DIVIDER

GL_DEFS = r"""
\newcommand{\glr}[1]{\textbf{#1}}
\newcommand{\maxlights}{8} % at least eight lights
\def\defaultambient{(0.2,0.2,0.2,1.0)}
"""

GL_BODY = r"""
\statetablecap{Texture Binding}{$^{\dag}$ Deprecated in the core profile.}{tab:texbind}
\ifnum\specdep=1
\doentry{TEXTURE\_BINDING\_$x$D}{$3 \times Z^+$}{\glr{GetIntegerv}}{0}{Texture object bound to the target; $x$ is 1, 2, or 3}{sec:texobj}{texture}
\else
\doentry{TEXTURE\_BINDING\_$x$D}{$3 \times Z^+$}{\glr{GetIntegerv}}{0}{Texture object bound to the target; $x$ is 1, 2, or 3}{sec:texobj}{texture}
\fi
\doentry{TEXTURE\_$x$D}{$3 \times B$}{\glr{IsEnabled}}{False}{True if $x$D texturing is enabled\ifnum\specdep=1 (fixed-function)\fi; $x$ is 1, 2, or 3}{sec:tex}{texture/enable}
\depentry{TEXTURE\_ENV\_MODE}{$\Enum$}{\glr{GetTexEnviv}}{MODULATE}{Texture application function$^{\dag}$}{sec:texenv}{texture}

% Lighting state
\statetable{Lighting}{tab:lighting}
\doentry{LIGHTING}{$B$}{\glr{IsEnabled}}{False}{True if lighting is enabled}{sec:lighting}{lighting/enable}
\depentry{LIGHT$i$}{$\maxlights* \times B$}{\glr{IsEnabled}}{False}{Light $i$ enabled\footnote{Lights beyond the minimum are implementation-dependent.}}{sec:lighting}{lighting/enable}
\doentry{LIGHT\_MODEL\_AMBIENT}{$C$}{\glr{GetFloatv}}{\defaultambient}{Ambient scene color}{sec:lighting}{lighting}
\imgentry{COLOR\_TABLE}{$B$}{\glr{IsEnabled}}{False}{True if color table lookup is enabled}{sec:colortable}{pixel/enable}
\doentry{POINT\_SIZE\_MIN (POINT\_SIZE\_MIN\_EXT)}{$R^+$}{\glr{GetFloatv}}{0.0}{Attenuated minimum point size}{sec:points}{point}
\doentry{-}{$4 \times Q$}{-}{-}{Unparseable type}{sec:misc}{-}
"""

ES11_BODY = r"""
\settable{tab:es11:vtx}{Vertex Array Data \\ $^{\dag}$ Requires OES\_point\_size\_array.}
\doentry{u}{Z^+}{0}{GetIntegerv}{CLIENT\_ACTIVE\_TEXTURE}{Client active texture unit}{2.8}{--}
\doentry{u}{2 \times B}{False}{IsEnabled}{TEXTURE\_$x$D}{True if $x$D texturing is enabled; $x$ is 2 or 3}{3.8}{--}
\doentry{u}{Z^+}{0}{GetTexParameteriv, GetTexParameterfv}{TEXTURE\_MIN\_FILTER}{Minification function$^{\dag}$}{3.8}{--}
"""


def make_source(body: str, defs: str = "", header: str = "% Generated table source") -> str:
    """Assemble a table source with both divider lines."""
    return "\n".join([header, DIVIDER, defs, DIVIDER, body])


def make_row(
    get_value: str = "LIGHTING",
    value_type: str = "$B$",
    get_command: str = r"\glr{IsEnabled}",
    initial_value: str = "False",
    description: str = "True if lighting is enabled",
    section: str = "sec:lighting",
    attribute: str = "lighting/enable",
    condition=None,
) -> RawRow:
    """Build a raw row with sensible defaults."""
    return RawRow(
        condition=condition,
        get_value=get_value,
        value_type=value_type,
        get_command=get_command,
        initial_value=initial_value,
        description=description,
        section=section,
        attribute=attribute,
    )


@pytest.fixture
def gl_source_text():
    """Complete gl table source."""
    return make_source(GL_BODY, GL_DEFS)


@pytest.fixture
def es11_source_text():
    """Complete es11 table source."""
    return make_source(ES11_BODY)


@pytest.fixture
def tables_dir(tmp_path, gl_source_text, es11_source_text):
    """Directory holding gl and es11 table sources."""
    source_dir = tmp_path / "tables_src"
    source_dir.mkdir()
    (source_dir / "gettables.gl.tex").write_text(gl_source_text)
    (source_dir / "gettables.es11.tex").write_text(es11_source_text)
    return source_dir


@pytest.fixture
def table():
    """Empty table without footnotes."""
    return Table(title="State", label="tab:state")
