from unittest import mock

from rest_framework import status
from rest_framework.test import APITestCase

from analyzer.models import StringRecord
from analyzer.predicates import parse_filter_query
from analyzer.utils import identify


class StringAnalyzerViewTests(APITestCase):

    def create(self, value):
        return self.client.post('/strings', {'value': value}, format='json')

    def test_create_string(self):
        resp = self.create("madam")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.json()
        self.assertEqual(data['id'], identify("madam"))
        self.assertEqual(data['value'], "madam")
        self.assertEqual(data['properties'], {
            'length': 5,
            'is_palindrome': True,
            'unique_characters': 3,
            'word_count': 1,
            'sha256_hash': identify("madam"),
            'character_frequency_map': {'m': 2, 'a': 2, 'd': 1},
        })
        self.assertIsNotNone(data['created_at'])

    def test_duplicate_is_conflict(self):
        self.create("madam")
        resp = self.create("madam")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('error', resp.json())
        self.assertEqual(StringRecord.objects.count(), 1)

    def test_empty_value_is_bad_request(self):
        self.assertEqual(self.create("   ").status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.client.post('/strings', {}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_wrong_type_is_unprocessable(self):
        for bad in (123, None, ['madam'], True):
            with self.subTest(value=bad):
                self.assertEqual(self.create(bad).status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_unpaired_surrogate_is_unprocessable(self):
        resp = self.client.post('/strings', data='{"value": "ab\\ud800"}',
                                content_type='application/json')
        self.assertEqual(resp.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertFalse(StringRecord.objects.exists())

    def test_unexpected_failure_hides_details(self):
        with mock.patch('analyzer.views.StringAnalyzerService.create',
                        side_effect=RuntimeError("db password is hunter2")):
            resp = self.create("madam")
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {'error': 'Internal server error'})


class StringListViewTests(APITestCase):

    def setUp(self):
        for value in ("madam", "hello world", "racecar", "abc"):
            self.client.post('/strings', {'value': value}, format='json')

    def test_query_is_parsed_once(self):
        with mock.patch('analyzer.filters.parse_filter_query',
                        wraps=parse_filter_query) as parse:
            resp = self.client.get('/strings', {'min_length': '5'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(parse.call_count, 1)
        self.assertEqual(resp.json()['filters_applied'], {'min_length': 5})

    def test_contains_double_quote(self):
        self.client.post('/strings', {'value': 'say "hi"'}, format='json')
        resp = self.client.get('/strings', {'contains_character': '"'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([d['value'] for d in resp.json()['data']], ['say "hi"'])

    def test_list_without_filters(self):
        resp = self.client.get('/strings')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual(data['count'], 4)
        self.assertEqual(data['filters_applied'], {})

    def test_structured_filters(self):
        resp = self.client.get('/strings', {
            'is_palindrome': 'true',
            'min_length': '5',
            'max_length': '7',
            'word_count': '1',
            'contains_character': 'R',
        })
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual([d['value'] for d in data['data']], ["racecar"])
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['filters_applied'], {
            'is_palindrome': True,
            'min_length': 5,
            'max_length': 7,
            'word_count': 1,
            'contains_character': 'r',
        })

    def test_no_matches_is_empty_success(self):
        resp = self.client.get('/strings', {'word_count': '9'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()['data'], [])
        self.assertEqual(resp.json()['count'], 0)

    def test_invalid_parameter_names_field(self):
        resp = self.client.get('/strings', {'min_length': 'abc'})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()['field'], 'min_length')

        resp = self.client.get('/strings', {'contains_character': 'ab'})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()['field'], 'contains_character')

    def test_inverted_bounds_conflict(self):
        resp = self.client.get('/strings', {'min_length': '8', 'max_length': '2'})
        self.assertEqual(resp.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)


class StringDetailViewTests(APITestCase):

    def setUp(self):
        self.client.post('/strings', {'value': 'race car'}, format='json')

    def test_get_by_value(self):
        resp = self.client.get('/strings/race car')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()['id'], identify('race car'))

    def test_get_missing_is_not_found(self):
        resp = self.client.get('/strings/nothing')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        resp = self.client.delete('/strings/race car')
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(StringRecord.objects.exists())
        resp = self.client.delete('/strings/race car')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_unexpected_failure_hides_details(self):
        with mock.patch('analyzer.views.StringAnalyzerService.get',
                        side_effect=RuntimeError("connection reset")):
            resp = self.client.get('/strings/race car')
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {'error': 'Internal server error'})

        with mock.patch('analyzer.views.StringAnalyzerService.delete',
                        side_effect=RuntimeError("connection reset")):
            resp = self.client.delete('/strings/race car')
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {'error': 'Internal server error'})


class NaturalLanguageFilterViewTests(APITestCase):
    url = '/strings/filter-by-natural-language'

    def setUp(self):
        for value in ("madam", "racecar", "hello", "never odd or even"):
            self.client.post('/strings', {'value': value}, format='json')

    def test_single_word_palindromes(self):
        query = "all single word palindromic strings"
        resp = self.client.get(self.url, {'query': query})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual(sorted(d['value'] for d in data['data']), ["madam", "racecar"])
        self.assertEqual(data['count'], 2)
        self.assertEqual(data['interpreted_query'], {
            'original': query,
            'parsed_filters': {'is_palindrome': True, 'word_count': 1},
        })

    def test_no_matches_is_empty_success(self):
        resp = self.client.get(self.url, {'query': 'strings containing the letter z'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()['count'], 0)

    def test_missing_query(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unparseable_query(self):
        resp = self.client.get(self.url, {'query': 'asdkjasdj'})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()['interpreted_query']['parsed_filters'], {})

    def test_conflicting_query(self):
        resp = self.client.get(self.url, {'query': 'strings longer than 10 and shorter than 5'})
        self.assertEqual(resp.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(resp.json()['interpreted_query']['parsed_filters'],
                         {'min_length': 11, 'max_length': 4})
