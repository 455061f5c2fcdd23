"""Tests for text normalization, tokenization and stemming."""

from policy_search.search.query_processor import QueryProcessor, Stemmer


class TestNormalize:
    def test_lowercases_and_replaces_punctuation(self, processor):
        assert processor.normalize("Wi-Fi, VPN & E-mail!!") == "wi fi vpn e mail"

    def test_underscore_is_a_separator(self, processor):
        assert processor.normalize("remote_work") == "remote work"

    def test_keeps_unicode_letters_and_digits(self, processor):
        assert processor.normalize("Café Über 90") == "café über 90"

    def test_empty(self, processor):
        assert processor.normalize("") == ""
        assert processor.normalize(None) == ""


class TestTokenize:
    def test_drops_stopwords(self, processor):
        assert processor.tokenize("The Password Policy") == ["password", "policy"]

    def test_stopword_only_query(self, processor):
        assert processor.tokenize("the and of should") == []

    def test_drops_single_characters(self, processor):
        assert processor.tokenize("x y io") == ["io"]

    def test_digits_are_terms(self, processor):
        assert processor.tokenize("L1 L2 90 days") == ["l1", "l2", "90", "days"]

    def test_applies_stemming(self, processor):
        assert processor.tokenize("connecting reported") == ["connect", "report"]

    def test_malformed_bytes_do_not_raise(self, processor):
        assert processor.tokenize(b"password \xff\xfe policy") == ["password", "policy"]

    def test_lone_surrogate_is_a_separator(self, processor):
        assert processor.tokenize("pass\ud800code") == ["pass", "code"]

    def test_deterministic(self, processor):
        text = "Security incidents must be reported within 2 hours."
        assert processor.tokenize(text) == processor.tokenize(text)

    def test_custom_stopwords(self):
        qp = QueryProcessor(stopwords={"policy"})
        assert qp.tokenize("the policy") == ["the"]


class TestStemmer:
    def test_strips_suffix(self):
        stemmer = Stemmer()
        assert stemmer.stem("connecting") == "connect"
        assert stemmer.stem("faster") == "fast"
        assert stemmer.stem("management") == "manage"
        assert stemmer.stem("quickly") == "quick"

    def test_short_stem_is_kept(self):
        stemmer = Stemmer()
        # Стем должен быть хотя бы на 2 символа длиннее суффикса
        assert stemmer.stem("red") == "red"
        assert stemmer.stem("used") == "used"
        assert stemmer.stem("dated") == "dated"
        assert stemmer.stem("using") == "using"
        assert stemmer.stem("reading") == "reading"
        assert stemmer.stem("nation") == "nation"

    def test_stem_length_boundary(self):
        stemmer = Stemmer()
        assert stemmer.stem("tested") == "test"
        assert stemmer.stem("printing") == "print"

    def test_first_suffix_in_list_order_wins(self):
        # "ion" стоит раньше "tion"
        assert Stemmer().stem("encryption") == "encrypt"
        assert Stemmer().stem("information") == "informat"

    def test_single_pass(self):
        # после снятия "ly" остаётся "quickest", второй проход не делается
        assert Stemmer().stem("quickestly") == "quickest"


class TestProcess:
    def test_process_builds_query(self, processor):
        query = processor.process("  Password RESET  ")
        assert query.raw_query == "Password RESET"
        assert query.normalized_query == "password reset"
        assert query.tokens == ["password", "reset"]
