from decimal import Decimal
import sqlite3

import pytest

from categorization.remote import RemoteClassifier
from services.base import Services
from services.categorization import (
    CategorizationService,
    SOURCE_ML,
    SOURCE_REMOTE,
    SOURCE_RULES,
)


class FailingPatterns:
    """Pattern store whose writes always fail."""

    def upsert(self, category_id, keyword):
        raise RuntimeError("database is locked")


class LockedCategories:
    """Category directory whose reads always fail."""

    def find_all_with_patterns(self, user_id):
        raise sqlite3.OperationalError("database is locked")


class TestCategorize:
    """Tests for the categorization fallback chain."""

    def test_cold_start_uses_rules(self, services, llm_provider, make_transaction):
        """Test that a known brand is categorized by rules with no learned data."""
        transaction = make_transaction(
            "Highlands Coffee", "thanh toan ca phe", Decimal("45000")
        )

        result = services.categorizer.categorize_with_source("alice", transaction)

        assert result.category == "Food & Dining"
        assert result.source == SOURCE_RULES
        assert result.confidence is None
        assert llm_provider.calls == []

    def test_unreadable_patterns_fall_through_to_rules(
        self, services, llm_provider, make_transaction
    ):
        """Test that a failing pattern read is treated as no evidence."""
        categorizer = CategorizationService(
            LockedCategories(),
            services.patterns,
            services.transactions,
            RemoteClassifier(llm_provider),
        )
        transaction = make_transaction(
            "Highlands Coffee", "thanh toan ca phe", Decimal("45000")
        )

        prediction = categorizer.classify("alice", transaction)
        result = categorizer.categorize_with_source("alice", transaction)

        assert prediction.is_prediction is False
        assert result.category == "Food & Dining"
        assert result.source == SOURCE_RULES
        assert llm_provider.calls == []

    def test_category_learned_after_listing(self, services, make_transaction, monkeypatch):
        """Test a category and its patterns created right after categories are listed."""
        categories = services.categories
        find_all = categories.find_all

        def find_all_then_learn(user_id):
            listed = find_all(user_id)
            services.categorizer.learn(user_id, "New", make_transaction("Grab"))
            return listed

        monkeypatch.setattr(categories, "find_all", find_all_then_learn)
        assert categories.find_all("alice") == []

        result = services.categorizer.categorize_with_source(
            "alice", make_transaction("Grab", "Di lam", Decimal("35000"))
        )
        loaded = categories.find_all_with_patterns("alice")

        assert result.category == "New"
        assert result.source == SOURCE_ML
        assert [c.name for c in loaded] == ["New"]
        assert all(p.category_id == loaded[0].id for p in loaded[0].patterns)
        assert {p.keyword for p in loaded[0].patterns} == {"grab", "under_10k"}

    def test_unmatched_transaction_goes_remote(
        self, services, llm_provider, make_transaction
    ):
        """Test that the remote classifier decides when rules give Other."""
        llm_provider.reply = "Shopping"
        transaction = make_transaction("Nguyen Van B", "abc", Decimal("120000"))

        result = services.categorizer.categorize_with_source("alice", transaction)

        assert result.category == "Shopping"
        assert result.source == SOURCE_REMOTE
        assert len(llm_provider.calls) == 1
        assert llm_provider.calls[0]["beneficiary_name"] == "Nguyen Van B"
        assert llm_provider.calls[0]["amount"] == Decimal("120000")

    def test_remote_failure_defaults_to_transfer(
        self, services, llm_provider, make_transaction
    ):
        """Test that a failing remote classifier still yields a category."""
        llm_provider.error = TimeoutError("request timed out")
        transaction = make_transaction("Nguyen Van B", "abc", Decimal("120000"))

        assert services.categorizer.categorize("alice", transaction) == "Transfer"

    def test_remote_unknown_reply_defaults_to_transfer(
        self, services, llm_provider, make_transaction
    ):
        """Test that an answer outside the vocabulary is not used."""
        llm_provider.reply = "Groceries and stuff"
        transaction = make_transaction("Nguyen Van B", "abc", Decimal("120000"))

        assert services.categorizer.categorize("alice", transaction) == "Transfer"

    def test_without_llm_provider_defaults_to_transfer(
        self, test_config, db_manager_with_schema, make_transaction
    ):
        """Test the remote tier when LLM use is disabled in config."""
        services = Services(test_config, db_manager=db_manager_with_schema)
        transaction = make_transaction("Nguyen Van B", "abc", Decimal("120000"))

        result = services.categorizer.categorize_with_source("alice", transaction)

        assert result.category == "Transfer"
        assert result.source == SOURCE_REMOTE

    def test_learned_patterns_take_precedence(
        self, services, llm_provider, make_transaction
    ):
        """Test that learned patterns beat rules for the same text."""
        transaction = make_transaction("Highlands Coffee", "Thanh toan", Decimal("45000"))
        services.categorizer.learn("alice", "Coffee", transaction)

        result = services.categorizer.categorize_with_source("alice", transaction)

        assert result.category == "Coffee"
        assert result.source == SOURCE_ML
        assert result.confidence == pytest.approx(1.0)
        assert llm_provider.calls == []

    def test_low_confidence_falls_through_to_rules(self, services, make_transaction):
        """Test that a tie between learned categories is not trusted."""
        first = services.categories.create("alice", "Coffee A")
        second = services.categories.create("alice", "Coffee B")
        services.patterns.upsert(first.id, "highlands")
        services.patterns.upsert(second.id, "highlands")
        transaction = make_transaction("Highlands")

        prediction = services.categorizer.classify("alice", transaction)
        result = services.categorizer.categorize_with_source("alice", transaction)

        assert prediction.is_prediction is True
        assert prediction.confidence == pytest.approx(0.5)
        assert result.category == "Food & Dining"
        assert result.source == SOURCE_RULES

    def test_weak_score_is_not_a_prediction(self, services, make_transaction):
        """Test that a score of 0.5 or less is treated as no evidence."""
        category = services.categories.create("alice", "Rare")
        services.patterns.upsert(category.id, "completely")
        transaction = make_transaction("completelx different", amount=Decimal("20000"))

        prediction = services.categorizer.classify("alice", transaction)

        assert prediction.is_prediction is False
        assert prediction.category == "Other"

    def test_patterns_are_per_user(self, services, make_transaction):
        """Test that one user's labels do not affect another user."""
        transaction = make_transaction("Nguyen Van A", "Tra da", Decimal("5000"))
        services.categorizer.learn("alice", "Trà đá", transaction)

        bob_view = make_transaction(
            "Nguyen Van A", "Tra da", Decimal("5000"), user_id="bob"
        )

        assert services.categorizer.classify("bob", bob_view).is_prediction is False
        assert services.categorizer.categorize("bob", bob_view) != "Trà đá"


class TestLearning:
    """Tests for learning from user labels."""

    def test_learning_builds_a_new_category(self, services, make_transaction):
        """Test that repeated labels teach a category the rules do not know."""
        labeled = make_transaction("Nguyen Van A", "Tra da", Decimal("5000"))
        for _ in range(3):
            assert services.categorizer.learn("alice", "Trà đá", labeled) is True

        category = services.categories.find_by_name("alice", "Trà đá")
        patterns = services.patterns.list("alice", category.id)
        assert {p.keyword for p in patterns} == {
            "nguyen van a",
            "nguyen",
            "van",
            "tra da",
            "tra",
            "under_10k",
        }
        assert all(p.occurrences == 3 for p in patterns)
        assert all(p.weight == pytest.approx(1.2) for p in patterns)

        new = make_transaction("Nguyen Van A", "Tra da", Decimal("7000"))
        result = services.categorizer.categorize_with_source("alice", new)

        assert result.category == "Trà đá"
        assert result.source == SOURCE_ML
        assert result.confidence == pytest.approx(1.0)

    def test_three_labels_predict_for_empty_remark(
        self, services, llm_provider, make_transaction
    ):
        """Test the three-label scenario against a transaction without remark."""
        labeled = make_transaction("Nguyen Van A", "tra da", Decimal("5000"))
        for _ in range(3):
            services.categorizer.learn("alice", "Trà đá", labeled)

        new = make_transaction("Nguyen Van A", "", Decimal("5000"))
        prediction = services.categorizer.classify("alice", new)
        result = services.categorizer.categorize_with_source("alice", new)

        assert prediction.is_prediction is True
        assert prediction.category == "Trà đá"
        assert prediction.confidence > 0.5
        assert result.category == "Trà đá"
        assert result.source == SOURCE_ML
        assert llm_provider.calls == []

    def test_learning_reinforces_monotonically(self, services, make_transaction):
        """Test that each label adds one occurrence and 0.1 weight per keyword."""
        transaction = make_transaction("Grab", "Di lam", Decimal("35000"))
        services.categorizer.learn("alice", "Transport", transaction)
        before = {p.keyword: p for p in services.patterns.list("alice")}

        services.categorizer.learn("alice", "Transport", transaction)
        after = {p.keyword: p for p in services.patterns.list("alice")}

        assert after.keys() == before.keys()
        for keyword, pattern in after.items():
            assert pattern.occurrences == before[keyword].occurrences + 1
            assert pattern.weight == pytest.approx(before[keyword].weight + 0.1)

    def test_learning_reuses_existing_category(self, services, make_transaction):
        """Test that learning into a seeded category does not duplicate it."""
        services.categories.ensure_defaults("alice")
        transaction = make_transaction("Grab", "Di lam", Decimal("35000"))

        services.categorizer.learn("alice", "Transport", transaction)

        names = [c.name for c in services.categories.find_all("alice")]
        assert names.count("Transport") == 1
        transport = services.categories.find_by_name("alice", "Transport")
        assert services.patterns.count(transport.id) > 0

    def test_learning_failure_is_swallowed(self, services, make_transaction):
        """Test that a failing pattern store makes learning report False."""
        categorizer = CategorizationService(
            services.categories,
            FailingPatterns(),
            services.transactions,
            RemoteClassifier(None),
        )
        transaction = make_transaction("Grab", "Di lam", Decimal("35000"))

        assert categorizer.learn("alice", "Transport", transaction) is False


class TestLabel:
    """Tests for labeling stored transactions."""

    def test_label_updates_and_learns(self, services, make_transaction):
        """Test that labeling stores the category and learns from it."""
        transaction = services.transactions.create(
            make_transaction("Nguyen Van A", "Tra da", Decimal("5000"))
        )

        labeled = services.categorizer.label("alice", transaction.id, "Trà đá")

        assert labeled.category == "Trà đá"
        assert labeled.is_user_labeled is True
        stored = services.transactions.find(transaction.id)
        assert stored.category == "Trà đá"
        assert stored.is_user_labeled is True
        category = services.categories.find_by_name("alice", "Trà đá")
        assert services.patterns.count(category.id) == 6

    def test_label_survives_learning_failure(self, services, make_transaction):
        """Test that the label is kept when learning fails."""
        categorizer = CategorizationService(
            services.categories,
            FailingPatterns(),
            services.transactions,
            RemoteClassifier(None),
        )
        transaction = services.transactions.create(
            make_transaction("Grab", "Di lam", Decimal("35000"))
        )

        categorizer.label("alice", transaction.id, "Transport")

        assert services.transactions.find(transaction.id).category == "Transport"

    def test_label_unknown_transaction_raises_error(self, services):
        """Test labeling a non-existent transaction."""
        with pytest.raises(Exception, match="Transaction with ID missing not found"):
            services.categorizer.label("alice", "missing", "Other")

    def test_label_other_users_transaction_raises_error(
        self, services, make_transaction
    ):
        """Test that users cannot label each other's transactions."""
        transaction = services.transactions.create(
            make_transaction("Grab", user_id="bob")
        )

        with pytest.raises(Exception, match="not found"):
            services.categorizer.label("alice", transaction.id, "Transport")

        assert services.transactions.find(transaction.id).category is None


class TestSuggest:
    """Tests for category suggestions."""

    def test_suggest_ranks_learned_categories(self, services, make_transaction):
        """Test that suggestions are ordered by score and capped at three."""
        services.categories.ensure_defaults("alice")
        grab = make_transaction("Grab", "Di lam", Decimal("35000"))
        services.categorizer.learn("alice", "Transport", grab)

        suggestions = services.categorizer.suggest("alice", grab)

        assert len(suggestions) == 3
        assert suggestions[0].category == "Transport"
        assert suggestions[0].score > 0
        assert suggestions[1].score == 0
