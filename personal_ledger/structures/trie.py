"""
Prefix index over record descriptions.

Answers "which stored descriptions start with X" in time proportional
to len(X) plus the number of matches.
"""

from typing import Optional


class TrieNode:
    """One character step; children are keyed by the next character."""

    __slots__ = ("children", "is_end_of_word")

    def __init__(self):
        self.children: dict[str, "TrieNode"] = {}
        self.is_end_of_word = False


class Trie:
    """
    Grow-only set of strings with prefix lookup.

    There is no delete; the structure only ever grows.
    Suggestions come back in lexicographic order.
    """

    def __init__(self):
        self._root = TrieNode()
        self._size = 0

    def insert(self, word: str) -> None:
        """Add a word. Inserting an existing word is a no-op."""
        node = self._root
        for char in word:
            child = node.children.get(char)
            if child is None:
                child = TrieNode()
                node.children[char] = child
            node = child
        if not node.is_end_of_word:
            node.is_end_of_word = True
            self._size += 1

    def suggestions(self, prefix: str) -> list[str]:
        """Every stored word that starts with prefix."""
        node = self._find(prefix)
        if node is None:
            return []

        results = []
        # Children are pushed in reverse order so they pop in sorted order
        stack = [(node, prefix)]
        while stack:
            current, text = stack.pop()
            if current.is_end_of_word:
                results.append(text)
            for char in sorted(current.children, reverse=True):
                stack.append((current.children[char], text + char))
        return results

    def _find(self, prefix: str) -> Optional[TrieNode]:
        # A failed lookup never adds nodes
        node = self._root
        for char in prefix:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        node = self._find(word)
        return node is not None and node.is_end_of_word

    def __len__(self) -> int:
        return self._size
