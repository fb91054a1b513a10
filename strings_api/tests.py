import hashlib
import json
from unittest import mock
from urllib.parse import quote

from django.apps import apps
from django.test import Client, SimpleTestCase

from .exceptions import BadQuery, Conflict, ConflictingFilters, InvalidFilterValue, NotFound
from .filters import filter_records
from .nl_filters import filter_by_natural_language, translate_query
from .store import ContentStore
from .utils import analyze_string, compute_sha256


class AnalyzeStringTests(SimpleTestCase):

    def test_palindrome_is_case_insensitive(self):
        self.assertTrue(analyze_string("Level").is_palindrome)
        self.assertTrue(analyze_string("RaceCar").is_palindrome)

    def test_palindrome_keeps_whitespace_and_punctuation(self):
        self.assertFalse(analyze_string("Level One").is_palindrome)
        self.assertFalse(analyze_string("A man, a plan, a canal: Panama").is_palindrome)

    def test_empty_string(self):
        props = analyze_string("")
        self.assertEqual(props.length, 0)
        self.assertTrue(props.is_palindrome)
        self.assertEqual(props.word_count, 0)
        self.assertEqual(props.unique_characters, 0)
        self.assertEqual(dict(props.character_frequency_map), {})

    def test_word_count_ignores_surrounding_and_repeated_whitespace(self):
        self.assertEqual(analyze_string("  hello   world\t again \n").word_count, 3)
        self.assertEqual(analyze_string("   ").word_count, 0)

    def test_hash_matches_sha256_of_utf8_bytes(self):
        value = "héllo wörld"
        expected = hashlib.sha256(value.encode("utf-8")).hexdigest()
        self.assertEqual(analyze_string(value).sha256_hash, expected)
        self.assertEqual(compute_sha256(value), compute_sha256(value))

    def test_lone_surrogate_is_hashed(self):
        props = analyze_string("a\ud800")
        self.assertEqual(props.length, 2)
        self.assertEqual(
            props.sha256_hash,
            hashlib.sha256("a\ud800".encode("utf-8", "surrogatepass")).hexdigest(),
        )

    def test_counts_code_points_not_bytes(self):
        props = analyze_string("😀a😀")
        self.assertEqual(props.length, 3)
        self.assertTrue(props.is_palindrome)
        self.assertEqual(dict(props.character_frequency_map), {"😀": 2, "a": 1})

    def test_frequency_invariants(self):
        for value in ["", "a", "hello world", "Mississippi", "aAaA  !!", "😀a😀"]:
            props = analyze_string(value)
            self.assertEqual(sum(props.character_frequency_map.values()), props.length)
            self.assertEqual(props.unique_characters, len(props.character_frequency_map))

    def test_frequency_map_is_read_only(self):
        props = analyze_string("abc")
        with self.assertRaises(TypeError):
            props.character_frequency_map["a"] = 10


class ContentStoreTests(SimpleTestCase):

    def setUp(self):
        self.store = ContentStore()

    def test_create_then_lookup_by_raw_value(self):
        created = self.store.create("hello world")
        self.assertEqual(created.id, compute_sha256("hello world"))
        self.assertIs(self.store.get_by_value("hello world"), created)
        self.assertIs(self.store.get(created.id), created)

    def test_duplicate_value_conflicts_and_keeps_original(self):
        first = self.store.create("racecar")
        with self.assertRaises(Conflict):
            self.store.create("racecar")
        stored = self.store.get_by_value("racecar")
        self.assertIs(stored, first)
        self.assertEqual(stored.created_at, first.created_at)
        self.assertEqual(len(self.store), 1)

    def test_create_skips_analysis_for_duplicates(self):
        self.store.create("again")
        with mock.patch("strings_api.store.analyze_string") as analyze:
            with self.assertRaises(Conflict):
                self.store.create("again")
        analyze.assert_not_called()

    def test_insert_rejects_existing_identity(self):
        record = self.store.create("abc")
        with self.assertRaises(Conflict):
            self.store.insert(record)

    def test_get_missing_raises_not_found(self):
        with self.assertRaises(NotFound):
            self.store.get(compute_sha256("nope"))

    def test_delete_twice(self):
        record = self.store.create("bye")
        self.store.delete(record.id)
        self.assertNotIn(record.id, self.store)
        with self.assertRaises(NotFound):
            self.store.delete(record.id)
        with self.assertRaises(NotFound):
            self.store.delete_by_value("bye")

    def test_list_is_insertion_ordered_snapshot(self):
        for value in ["one", "two", "three"]:
            self.store.create(value)
        snapshot = self.store.list()
        self.store.create("four")
        self.assertEqual([r.value for r in snapshot], ["one", "two", "three"])
        self.assertEqual([r.value for r in snapshot], ["one", "two", "three"])
        self.assertEqual(len(self.store.list()), 4)


class StructuredFilterTests(SimpleTestCase):

    def setUp(self):
        self.store = ContentStore()
        for value in ["zebra", "apple", "level", "hello world", "a"]:
            self.store.create(value)
        self.records = self.store.list()

    def values(self, records):
        return [r.value for r in records]

    def test_no_filters_returns_everything(self):
        records, applied = filter_records(self.records, {})
        self.assertEqual(len(records), 5)
        self.assertIsNone(applied)

    def test_unknown_params_are_ignored(self):
        records, applied = filter_records(self.records, {"colour": "blue"})
        self.assertEqual(len(records), 5)
        self.assertIsNone(applied)

    def test_contains_character(self):
        records, applied = filter_records(self.records, {"contains_character": "z"})
        self.assertEqual(self.values(records), ["zebra"])
        self.assertEqual(applied, {"contains_character": "z"})

    def test_contains_character_is_case_sensitive(self):
        records, _ = filter_records(self.records, {"contains_character": "Z"})
        self.assertEqual(records, [])

    def test_contains_character_must_be_one_character(self):
        for bad in ["ab", ""]:
            with self.assertRaises(InvalidFilterValue) as ctx:
                filter_records(self.records, {"contains_character": bad})
            self.assertEqual(ctx.exception.filter_name, "contains_character")

    def test_filters_are_parsed_from_query_strings(self):
        records, applied = filter_records(
            self.records,
            {"is_palindrome": "true", "min_length": "2", "word_count": "1"},
        )
        self.assertEqual(self.values(records), ["level"])
        self.assertEqual(
            applied, {"is_palindrome": True, "min_length": 2, "word_count": 1}
        )

    def test_length_bounds_are_inclusive(self):
        records, _ = filter_records(self.records, {"min_length": "5", "max_length": "5"})
        self.assertEqual(self.values(records), ["zebra", "apple", "level"])

    def test_inverted_bounds_filter_to_nothing(self):
        records, applied = filter_records(self.records, {"min_length": "6", "max_length": "2"})
        self.assertEqual(records, [])
        self.assertEqual(applied, {"min_length": 6, "max_length": 2})

    def test_is_palindrome_false(self):
        records, _ = filter_records(self.records, {"is_palindrome": "false"})
        self.assertEqual(self.values(records), ["zebra", "apple", "hello world"])

    def test_integer_filters_accept_whole_number_spellings(self):
        for raw in ["5", "5.0", " 5 "]:
            records, applied = filter_records(self.records, {"min_length": raw})
            self.assertEqual(applied, {"min_length": 5})
            self.assertEqual(self.values(records), ["zebra", "apple", "level", "hello world"])

    def test_invalid_values_name_the_filter(self):
        cases = {
            "min_length": "abc",
            "max_length": "1.5",
            "word_count": "-1",
            "is_palindrome": "maybe",
        }
        for name, raw in cases.items():
            with self.assertRaises(InvalidFilterValue) as ctx:
                filter_records(self.records, {name: raw})
            self.assertEqual(ctx.exception.filter_name, name)
            self.assertIn(name, ctx.exception.message)


class NaturalLanguageTranslatorTests(SimpleTestCase):

    def test_empty_or_blank_query(self):
        for query in [None, "", "   \t"]:
            with self.assertRaises(BadQuery):
                translate_query(query)

    def test_single_word_palindromic(self):
        self.assertEqual(
            translate_query("All SINGLE WORD Palindromic strings"),
            {"word_count": 1, "is_palindrome": True},
        )

    def test_not_palindromic_wins(self):
        self.assertEqual(
            translate_query("strings that are not palindromic"),
            {"is_palindrome": False},
        )

    def test_letter_z_overrides_first_vowel(self):
        self.assertEqual(translate_query("strings with the first vowel"), {"contains_character": "a"})
        self.assertEqual(
            translate_query("first vowel or the letter z"),
            {"contains_character": "z"},
        )

    def test_longer_than_is_strict(self):
        self.assertEqual(
            translate_query("strings longer than 10 characters"),
            {"min_length": 11},
        )

    def test_oversized_length_bound_is_invalid(self):
        query = "strings longer than " + "9" * 5000 + " characters"
        with self.assertRaises(InvalidFilterValue) as ctx:
            translate_query(query)
        self.assertEqual(ctx.exception.filter_name, "min_length")

    def test_longer_than_without_number_adds_nothing(self):
        self.assertEqual(translate_query("strings longer than ten characters"), {})
        self.assertEqual(translate_query("longer than 10 words"), {})

    def test_unrecognised_query_matches_everything(self):
        store = ContentStore()
        store.create("hi")
        result = filter_by_natural_language(store.list(), "show me something")
        self.assertEqual(result["count"], 1)
        self.assertEqual(result["interpreted_query"]["parsed_filters"], {})

    def test_single_word_not_palindromic_always_conflicts(self):
        with self.assertRaises(ConflictingFilters):
            filter_by_natural_language((), "find a single word that is not palindromic")

    def test_longer_than_filters_records(self):
        store = ContentStore()
        store.create("hi")
        store.create("hello world")
        result = filter_by_natural_language(store.list(), "strings longer than 5 characters")
        self.assertEqual([r.value for r in result["data"]], ["hello world"])
        self.assertEqual(result["count"], 1)
        self.assertEqual(
            result["interpreted_query"],
            {"original": "strings longer than 5 characters", "parsed_filters": {"min_length": 6}},
        )


class StringsApiTests(SimpleTestCase):

    def setUp(self):
        self.client = Client()
        self.store = apps.get_app_config("strings_api").store
        self.store.clear()

    def tearDown(self):
        self.store.clear()

    def create(self, payload):
        return self.client.post(
            "/strings",
            data=json.dumps(payload),
            content_type="application/json",
        )

    def test_create_string(self):
        resp = self.create({"value": "Level"})
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["id"], compute_sha256("Level"))
        self.assertEqual(data["value"], "Level")
        self.assertEqual(
            data["properties"],
            {
                "length": 5,
                "is_palindrome": True,
                "unique_characters": 4,
                "word_count": 1,
                "sha256_hash": compute_sha256("Level"),
                "character_frequency_map": {"L": 1, "e": 2, "v": 1, "l": 1},
            },
        )
        self.assertIn("created_at", data)

    def test_create_string_with_null_character(self):
        resp = self.create({"value": "a\x00b"})
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["value"], "a\x00b")
        self.assertEqual(data["id"], compute_sha256("a\x00b"))
        self.assertEqual(data["properties"]["length"], 3)

    def test_create_string_with_lone_surrogate(self):
        resp = self.create({"value": "a\ud800"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["id"], compute_sha256("a\ud800"))

    def test_create_empty_string(self):
        resp = self.create({"value": ""})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["properties"]["length"], 0)

    def test_create_duplicate(self):
        first = self.create({"value": "hello"}).json()
        resp = self.create({"value": "hello"})
        self.assertEqual(resp.status_code, 409)
        self.assertIn("error", resp.json())
        self.assertNotIn("data", resp.json())
        self.assertEqual(self.client.get("/strings/hello").json(), first)

    def test_create_missing_value(self):
        resp = self.create({"text": "hello"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_create_wrong_type(self):
        for value in [123, None, ["a"], True]:
            resp = self.create({"value": value})
            self.assertEqual(resp.status_code, 422, value)

    def test_get_and_delete_by_value(self):
        self.create({"value": "hello world"})
        path = "/strings/" + quote("hello world")

        resp = self.client.get(path)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["id"], compute_sha256("hello world"))

        self.assertEqual(self.client.delete(path).status_code, 204)
        self.assertEqual(self.client.delete(path).status_code, 404)
        self.assertEqual(self.client.get(path).status_code, 404)

    def test_get_missing(self):
        resp = self.client.get("/strings/missing")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(set(resp.json()), {"error"})

    def test_list_without_filters_omits_filters_applied(self):
        self.create({"value": "abc"})
        self.create({"value": "level"})
        resp = self.client.get("/strings")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual([r["value"] for r in data["data"]], ["abc", "level"])
        self.assertNotIn("filters_applied", data)

    def test_list_with_filters(self):
        for value in ["zebra", "apple", "level"]:
            self.create({"value": value})
        resp = self.client.get("/strings", {"contains_character": "z", "min_length": "3"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([r["value"] for r in data["data"]], ["zebra"])
        self.assertEqual(data["count"], 1)
        self.assertEqual(data["filters_applied"], {"contains_character": "z", "min_length": 3})

    def test_list_filtered_to_nothing_still_reports_filters(self):
        self.create({"value": "apple"})
        data = self.client.get("/strings", {"is_palindrome": "true"}).json()
        self.assertEqual(data["data"], [])
        self.assertEqual(data["count"], 0)
        self.assertEqual(data["filters_applied"], {"is_palindrome": True})

    def test_list_with_invalid_filter(self):
        resp = self.client.get("/strings", {"contains_character": "ab"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("contains_character", resp.json()["error"])
        self.assertNotIn("data", resp.json())

        resp = self.client.get("/strings", {"min_length": "x"})
        self.assertEqual(resp.status_code, 400)

    def test_natural_language_filter(self):
        for value in ["racecar", "hello", "never odd or even"]:
            self.create({"value": value})
        resp = self.client.get(
            "/strings/filter-by-natural-language",
            {"query": "all single word palindromic strings"},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([r["value"] for r in data["data"]], ["racecar"])
        self.assertEqual(data["count"], 1)
        self.assertEqual(
            data["interpreted_query"],
            {
                "original": "all single word palindromic strings",
                "parsed_filters": {"word_count": 1, "is_palindrome": True},
            },
        )

    def test_natural_language_conflict(self):
        resp = self.client.get(
            "/strings/filter-by-natural-language",
            {"query": "find a single word that is not palindromic"},
        )
        self.assertEqual(resp.status_code, 422)
        self.assertNotIn("data", resp.json())

    def test_natural_language_oversized_number(self):
        resp = self.client.get(
            "/strings/filter-by-natural-language",
            {"query": "longer than " + "9" * 5000 + " characters"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("min_length", resp.json()["error"])
        self.assertNotIn("data", resp.json())

    def test_natural_language_bad_query(self):
        self.assertEqual(self.client.get("/strings/filter-by-natural-language").status_code, 400)
        resp = self.client.get("/strings/filter-by-natural-language", {"query": "   "})
        self.assertEqual(resp.status_code, 400)
