"""Language records for diff highlighting.

Each language is a plain data record: keyword and type tables, comment
markers and string delimiters. The tokenizer is a single function
parameterized by one of these records.

Execution Context:
    Library module - imported by the highlighter and diff parser

Dependencies:
    - None (stdlib only)

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath


PLAIN = "plain"


# ---- Language Record ----------------------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguageSpec:
    """Lexical description of a language.

    Attributes:
        name: Language tag.
        keywords: Reserved words.
        types: Built-in type names.
        line_comments: Markers starting a comment that runs to end of line.
        block_comment: (open, close) markers, or None.
        string_delimiters: Characters opening and closing string literals.

    Comment markers are at most two characters long.
    """

    name: str
    keywords: frozenset[str] = frozenset()
    types: frozenset[str] = frozenset()
    line_comments: tuple[str, ...] = ()
    block_comment: tuple[str, str] | None = None
    string_delimiters: tuple[str, ...] = ('"', "'")


def _words(
        text: str,
) -> frozenset[str]:
    return frozenset(text.split())


C_FAMILY_TYPES = _words("""
    void char short int long float double signed unsigned bool size_t
    int8_t int16_t int32_t int64_t uint8_t uint16_t uint32_t uint64_t
""")

C_KEYWORDS = _words("""
    auto break case const continue default do else enum extern for goto if
    inline register restrict return sizeof static struct switch typedef union
    volatile while NULL true false
""")


# ---- Language Table -----------------------------------------------------------------------------------------


LANGUAGES: dict[str, LanguageSpec] = {
    spec.name: spec
    for spec in (
        LanguageSpec(
            name="python",
            keywords=_words("""
                False None True and as assert async await break class continue
                def del elif else except finally for from global if import in is
                lambda nonlocal not or pass raise return try while with yield
                match case self
            """),
            types=_words("int float str bytes bool list dict set tuple object type complex frozenset"),
            line_comments=("#",),
        ),
        LanguageSpec(
            name="rust",
            keywords=_words("""
                as async await break const continue crate dyn else enum extern
                false fn for if impl in let loop match mod move mut pub ref
                return self Self static struct super trait true type unsafe use
                where while
            """),
            types=_words("""
                i8 i16 i32 i64 i128 isize u8 u16 u32 u64 u128 usize f32 f64
                bool char str String Vec Option Result Box HashMap HashSet
            """),
            line_comments=("//",),
            block_comment=("/*", "*/"),
            string_delimiters=('"',),
        ),
        LanguageSpec(
            name="javascript",
            keywords=_words("""
                async await break case catch class const continue debugger
                default delete do else export extends false finally for function
                if import in instanceof let new null return super switch this
                throw true try typeof undefined var void while with yield
            """),
            types=_words("Array Boolean Date Error Map Number Object Promise RegExp Set String Symbol"),
            line_comments=("//",),
            block_comment=("/*", "*/"),
            string_delimiters=('"', "'", "`"),
        ),
        LanguageSpec(
            name="typescript",
            keywords=_words("""
                abstract as async await break case catch class const continue
                declare default delete do else enum export extends false finally
                for from function if implements import in instanceof interface
                keyof let namespace new null private protected public readonly
                return super switch this throw true try type typeof undefined var
                void while yield
            """),
            types=_words("""
                any boolean never number object string symbol unknown Array
                Map Promise Record Set
            """),
            line_comments=("//",),
            block_comment=("/*", "*/"),
            string_delimiters=('"', "'", "`"),
        ),
        LanguageSpec(
            name="go",
            keywords=_words("""
                break case chan const continue default defer else fallthrough
                for func go goto if import interface map package range return
                select struct switch type var nil true false iota
            """),
            types=_words("""
                bool byte complex64 complex128 error float32 float64 int int8
                int16 int32 int64 rune string uint uint8 uint16 uint32 uint64
                uintptr any
            """),
            line_comments=("//",),
            block_comment=("/*", "*/"),
            string_delimiters=('"', "'", "`"),
        ),
        LanguageSpec(
            name="c",
            keywords=C_KEYWORDS,
            types=C_FAMILY_TYPES,
            line_comments=("//",),
            block_comment=("/*", "*/"),
        ),
        LanguageSpec(
            name="cpp",
            keywords=C_KEYWORDS | _words("""
                class namespace template typename public private protected
                virtual override new delete this throw try catch using nullptr
                constexpr noexcept operator friend explicit
            """),
            types=C_FAMILY_TYPES | _words("string vector map set unique_ptr shared_ptr auto"),
            line_comments=("//",),
            block_comment=("/*", "*/"),
        ),
        LanguageSpec(
            name="java",
            keywords=_words("""
                abstract assert break case catch class continue default do else
                enum extends final finally for if implements import instanceof
                interface native new null package private protected public
                return static super switch synchronized this throw throws try
                void volatile while true false var record
            """),
            types=_words("boolean byte char double float int long short String Integer Object List Map"),
            line_comments=("//",),
            block_comment=("/*", "*/"),
        ),
        LanguageSpec(
            name="ruby",
            keywords=_words("""
                alias and begin break case class def defined? do else elsif end
                ensure false for if in module next nil not or redo rescue retry
                return self super then true undef unless until when while yield
            """),
            types=_words("Array Hash String Integer Float Symbol"),
            line_comments=("#",),
        ),
        LanguageSpec(
            name="shell",
            keywords=_words("""
                if then else elif fi case esac for while until do done in
                function return local export readonly
            """),
            line_comments=("#",),
        ),
        LanguageSpec(
            name="sql",
            keywords=_words("""
                select from where insert into update delete create table drop
                alter index join left right inner outer on group by order having
                limit and or not null as values set primary key foreign
                references SELECT FROM WHERE INSERT INTO UPDATE DELETE CREATE
                TABLE DROP ALTER INDEX JOIN LEFT RIGHT INNER OUTER ON GROUP BY
                ORDER HAVING LIMIT AND OR NOT NULL AS VALUES SET PRIMARY KEY
                FOREIGN REFERENCES
            """),
            types=_words("int integer text varchar boolean date timestamp INT INTEGER TEXT VARCHAR BOOLEAN"),
            line_comments=("--",),
            block_comment=("/*", "*/"),
            string_delimiters=("'",),
        ),
        LanguageSpec(
            name="toml",
            keywords=_words("true false"),
            line_comments=("#",),
        ),
        LanguageSpec(
            name="yaml",
            keywords=_words("true false null yes no"),
            line_comments=("#",),
        ),
        LanguageSpec(
            name="json",
            keywords=_words("true false null"),
            string_delimiters=('"',),
        ),
        LanguageSpec(
            name="css",
            keywords=_words("important media import from to"),
            block_comment=("/*", "*/"),
        ),
    )
}

EXTENSIONS: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".rs": "rust",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".java": "java",
    ".rb": "ruby",
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
    ".sql": "sql",
    ".toml": "toml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".css": "css",
}

FILENAMES: dict[str, str] = {
    "Cargo.lock": "toml",
    "Gemfile": "ruby",
    "Rakefile": "ruby",
    ".bashrc": "shell",
    ".zshrc": "shell",
}


# ---- Lookup -------------------------------------------------------------------------------------------------


def detect_language(
        path: str | None,
) -> str:
    """Derive a language tag from a file path.

    Args:
        path: File path as found in the diff header.

    Returns:
        Language tag, or 'plain' when the path is not recognized.
    """
    if not path:
        return PLAIN
    file_path = PurePosixPath(path)
    if file_path.name in FILENAMES:
        return FILENAMES[file_path.name]
    return EXTENSIONS.get(file_path.suffix.lower(), PLAIN)


def get_language(
        tag: str,
) -> LanguageSpec | None:
    """Get the record for a language tag (None for 'plain' or unknown)."""
    if tag == PLAIN:
        return None
    return LANGUAGES.get(tag)
