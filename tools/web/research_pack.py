"""Build the grounding context and instruction prompt for answer generation."""

from models.search_result import SourceDocument


def build_grounding_context(sources: list[SourceDocument], contents: list[str]) -> str:
    """
    Render one labeled block per source that has a content slot.

    Only the first min(len(sources), len(contents)) pairs are used; an empty
    content string still produces a block so the source can be cited.

    Args:
        sources: Ranked sources
        contents: Page text aligned by index with sources

    Returns:
        Blocks of "[id] Title / URL / Excerpt" separated by blank lines
    """
    blocks = []
    for source, content in zip(sources, contents):
        blocks.append(
            f"[{source.id}] Title: {source.title}\n"
            f"URL: {source.url}\n"
            f"Excerpt:\n{content}\n"
        )
    return "\n".join(blocks)


def build_answer_prompt(query: str, sources: list[SourceDocument], contents: list[str]) -> str:
    """
    Build the single instruction prompt sent to the language model.

    Args:
        query: Normalized user query
        sources: Ranked sources
        contents: Page text aligned by index with sources

    Returns:
        Prompt text with grounding rules, the question and the sources
    """
    context = build_grounding_context(sources, contents)
    lines = [
        "You are a web-source grounded answering assistant.",
        "Answer ONLY from the sources below; do not use outside knowledge.",
        "Cite every factual claim with the bracketed source number at the end of the sentence, e.g. [1], [2].",
        "If a claim is not clearly supported by the sources, mark it as (uncertain).",
        "",
        f"Question: {query}",
        "",
        "Sources:",
        context,
    ]
    return "\n".join(lines)
