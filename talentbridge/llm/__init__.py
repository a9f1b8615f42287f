from .client import LLMClient, build_llm_client, parse_json_object

__all__ = ['LLMClient', 'build_llm_client', 'parse_json_object']
