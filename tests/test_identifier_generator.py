"""Tests for random identifier generation."""

from shortener.core.validators import is_valid_id
from shortener.services.identifier_generator import ID_ALPHABET, IdentifierGenerator


def test_alphabet_is_base62():
    assert len(ID_ALPHABET) == 62
    assert len(set(ID_ALPHABET)) == 62


def test_generated_ids_have_id_shape():
    generator = IdentifierGenerator()
    for _ in range(500):
        assert is_valid_id(generator.generate())


def test_generated_ids_vary():
    generator = IdentifierGenerator()
    assert len({generator.generate() for _ in range(200)}) > 190
