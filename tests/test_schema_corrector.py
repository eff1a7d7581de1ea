"""Tests for the capability-based schema corrections."""

from __future__ import annotations

import pytest

from conftest import make_model, text_generation_schema
from core.domain.models import SchemaPair, WarningKind
from core.services.schema_corrector import correct_schema, correct_schemas


def _input_fields(schema: SchemaPair) -> list[set[str]]:
    return [set(branch.get("properties", {})) for branch in schema.input["oneOf"]]


def _output_fields(schema: SchemaPair) -> list[set[str]]:
    return [set(branch.get("properties", {})) for branch in schema.output["oneOf"]]


class TestCorrectSchema:
    def test_strips_tools_without_function_calling(self):
        model = make_model("@cf/meta/llama", properties={"lora": "true"})
        corrected = correct_schema(model, SchemaPair.model_validate(text_generation_schema()))

        assert _input_fields(corrected) == [{"prompt", "lora"}, {"messages", "lora"}]
        assert _output_fields(corrected) == [{"response"}, set()]

    def test_keeps_tools_with_function_calling(self):
        model = make_model("@cf/meta/llama", properties={"function_calling": "true", "lora": "true"})
        corrected = correct_schema(model, SchemaPair.model_validate(text_generation_schema()))

        assert "tools" in corrected.input["oneOf"][1]["properties"]
        assert "tool_calls" in corrected.output["oneOf"][0]["properties"]

    @pytest.mark.parametrize("value", [None, "false", "TRUE", True])
    def test_function_calling_must_be_the_string_true(self, value):
        properties = {"function_calling": value} if value is not None else {}
        model = make_model("@cf/meta/llama", properties=properties)
        corrected = correct_schema(model, SchemaPair.model_validate(text_generation_schema()))

        assert "tools" not in corrected.input["oneOf"][1]["properties"]

    def test_strips_lora_without_lora_support(self):
        model = make_model("@cf/meta/llama", properties={"function_calling": "true"})
        corrected = correct_schema(model, SchemaPair.model_validate(text_generation_schema()))

        assert _input_fields(corrected) == [{"prompt"}, {"messages", "tools"}]

    def test_other_tasks_are_untouched(self):
        model = make_model("@cf/openai/whisper", task="Automatic Speech Recognition")
        original = SchemaPair.model_validate(text_generation_schema())

        assert correct_schema(model, original) == original

    def test_branch_without_properties_is_tolerated(self):
        model = make_model("@cf/meta/llama")
        schema = SchemaPair.model_validate(
            {
                "input": {"oneOf": [{"type": "string"}, {"properties": {"prompt": {}, "lora": {}, "tools": {}}}]},
                "output": {"oneOf": [{"type": "string"}]},
            }
        )
        corrected = correct_schema(model, schema)

        assert corrected.input["oneOf"][0] == {"type": "string"}
        assert corrected.input["oneOf"][1]["properties"] == {"prompt": {}}

    def test_schema_without_one_of_is_tolerated(self):
        model = make_model("@cf/meta/llama")
        schema = SchemaPair.model_validate({"input": {"type": "object"}, "output": None})

        assert correct_schema(model, schema) == schema

    def test_missing_input_schema_warns_and_skips(self):
        model = make_model("@cf/meta/llama")
        schema = SchemaPair.model_validate({"output": text_generation_schema()["output"]})
        warnings = []

        corrected = correct_schema(model, schema, warnings=warnings)

        assert "tool_calls" in corrected.output["oneOf"][0]["properties"]
        assert [w.kind for w in warnings] == [WarningKind.MISSING_SCHEMA]
        assert warnings[0].model == "@cf/meta/llama"

    def test_does_not_mutate_input(self):
        model = make_model("@cf/meta/llama")
        original = SchemaPair.model_validate(text_generation_schema())
        snapshot = original.model_dump()

        correct_schema(model, original)

        assert original.model_dump() == snapshot


class TestCorrectSchemas:
    def test_is_idempotent(self):
        models = [
            make_model("@cf/meta/llama"),
            make_model("@cf/meta/llama-fc", properties={"function_calling": "true"}),
        ]
        schemas = {m.name: SchemaPair.model_validate(text_generation_schema()) for m in models}

        once = correct_schemas(models, schemas)
        twice = correct_schemas(models, once)

        assert once == twice

    def test_unknown_entries_pass_through(self):
        schema = SchemaPair.model_validate(text_generation_schema())
        corrected = correct_schemas([], {"@cf/other/model": schema})

        assert corrected["@cf/other/model"] == schema
        assert corrected["@cf/other/model"] is not schema
