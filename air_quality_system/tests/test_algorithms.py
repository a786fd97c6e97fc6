"""
Tests for the Algorithm tag.
"""

import pytest

from airquality.algorithms import Algorithm


class TestAlgorithm:
    """Test suite for Algorithm."""

    def test_multipliers(self):
        assert Algorithm.NAIVE_BAYES.multiplier == 0.95
        assert Algorithm.KNN.multiplier == 1.05
        assert Algorithm.SVM.multiplier == 1.00
        assert Algorithm.RANDOM_FOREST.multiplier == 1.02

    @pytest.mark.parametrize("tag", ["random-forest", "random_forest", "Random-Forest", " RANDOM_FOREST "])
    def test_parse_spellings(self, tag):
        assert Algorithm.parse(tag) is Algorithm.RANDOM_FOREST

    def test_parse_member(self):
        assert Algorithm.parse(Algorithm.KNN) is Algorithm.KNN

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="rnn"):
            Algorithm.parse("rnn")

    def test_labels(self):
        assert Algorithm.SVM.label == "Support Vector Machine (SVM)"
        assert all(algorithm.description for algorithm in Algorithm)
