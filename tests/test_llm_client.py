import unittest
from types import SimpleNamespace
from unittest.mock import Mock, patch

from talentbridge.exceptions import ExternalServiceError
from talentbridge.llm.client import (
    LLMClient,
    build_llm_client,
    extract_json_object,
    parse_json_object,
    strip_code_fences,
)


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestJsonCleanup(unittest.TestCase):

    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_first_object_is_extracted(self):
        text = 'prefix {"a": {"b": 1}} trailing {"c": 2}'
        self.assertEqual(extract_json_object(text), '{"a": {"b": 1}}')

    def test_braces_inside_strings_are_ignored(self):
        text = '{"text": "a } brace and a \\" quote {"}'
        self.assertEqual(parse_json_object(text), {'text': 'a } brace and a " quote {'})

    def test_no_object_raises(self):
        with self.assertRaises(ExternalServiceError):
            parse_json_object('no json here')

    def test_unterminated_object_raises(self):
        with self.assertRaises(ExternalServiceError):
            parse_json_object('{"a": 1')

    def test_invalid_json_raises(self):
        with self.assertRaises(ExternalServiceError):
            parse_json_object("{'single': 'quotes'}")


class TestLLMClient(unittest.TestCase):

    def setUp(self):
        self.openai = Mock()
        self.client = LLMClient(api_key='test', model='test-model', client=self.openai)

    def test_generate_returns_stripped_content(self):
        self.openai.chat.completions.create.return_value = _completion('  hello  ')
        self.assertEqual(self.client.generate('prompt', system='sys'), 'hello')

        kwargs = self.openai.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['model'], 'test-model')
        self.assertEqual(kwargs['messages'][0], {'role': 'system', 'content': 'sys'})
        self.assertEqual(kwargs['messages'][1], {'role': 'user', 'content': 'prompt'})

    def test_api_error_becomes_external_service_error(self):
        self.openai.chat.completions.create.side_effect = RuntimeError('connection reset')
        with self.assertRaises(ExternalServiceError):
            self.client.generate('prompt')

    def test_empty_content_is_an_error(self):
        self.openai.chat.completions.create.return_value = _completion('')
        with self.assertRaises(ExternalServiceError):
            self.client.generate('prompt')

    def test_generate_json(self):
        self.openai.chat.completions.create.return_value = _completion('```json\n{"skills": ["Go"]}\n```')
        self.assertEqual(self.client.generate_json('prompt'), {'skills': ['Go']})


class TestBuildLLMClient(unittest.TestCase):

    def test_no_key_means_not_configured(self):
        self.assertIsNone(build_llm_client({'OPENAI_API_KEY': ''}))

    @patch('talentbridge.llm.client.OpenAI')
    def test_client_is_single_attempt(self, mock_openai):
        client = build_llm_client({'OPENAI_API_KEY': 'sk-test', 'OPENAI_TIMEOUT': 5.0})
        self.assertIsNotNone(client)
        mock_openai.assert_called_once_with(api_key='sk-test', timeout=5.0, max_retries=0)


if __name__ == '__main__':
    unittest.main()
