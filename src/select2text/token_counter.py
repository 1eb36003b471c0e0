"""Statistics for export documents: lines, characters and optional tokens.

Token counting uses OpenAI's tiktoken library, which is an optional dependency
installed through the ``token_counting`` extra. Lines and characters are always
counted.

Fragments are tokenized one at a time as they are produced, so the total is an
approximation of what tokenizing the whole document at once would give; the
difference is at most a few tokens per fragment boundary.
"""

import importlib.util
import logging
from collections import namedtuple
from typing import Any, Optional

from select2text.exceptions import TokenizationError, TokenizerNotAvailableError

logger = logging.getLogger(__name__)

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


def tiktoken_available() -> bool:
    """Return True if the tiktoken library can be imported."""
    return importlib.util.find_spec("tiktoken") is not None


class TokenCounter:
    """Counts lines, characters and tokens of export fragments and keeps a running token total.

    Without a model the counter still counts lines and characters of each
    fragment and reports None for tokens.

    Attributes:
        model (Optional[str]): Model whose tokenizer is used, or None to disable token counting.
        encoder (Optional[Any]): The tiktoken encoding, or None when disabled.

    Raises:
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken has no tokenizer for the given model.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("# Title\\n\\nbody\\n")
        CountResult(lines=3, tokens=None, characters=14)
        >>> print(counter.get_total_tokens())
        None
    """

    def __init__(self, model: Optional[str] = None) -> None:
        self.model = model
        self.encoder: Optional[Any] = None
        if model is not None:
            if not tiktoken_available():
                raise TokenizerNotAvailableError()
            self.encoder = self._get_encoder(model)
        self.reset_counts()

    @staticmethod
    def _get_encoder(model: str) -> Any:
        # Imported here because tiktoken is optional
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider using a "
                "well-supported model like 'gpt-4' (cl100k_base encoding) or 'gpt-4o' "
                "(o200k_base encoding); counts will be an approximation for other models."
            )

    def count(self, text: str) -> CountResult:
        """Count one fragment and add its tokens to the running total.

        Raises:
            TokenizationError: If token counting is enabled but the tokenizer fails.
        """
        lines = text.count("\n")
        characters = len(text)
        tokens = None
        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text, disallowed_special=()))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {e}")
            self._total_tokens = (self._total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=characters)

    def get_total_tokens(self) -> Optional[int]:
        """Total tokens so far, or None if token counting is disabled."""
        return self._total_tokens

    def reset_counts(self) -> None:
        """Reset the running token total, keeping the tokenizer."""
        self._total_tokens: Optional[int] = 0 if self.encoder is not None else None
