import pytest
from app_env_config import (
    RuntimeContext,
    ParseVariableError,
    CombinedParseVariableError,
    ConfigurationDeclarationError,
    Rule,
    Declaration,
    declare,
    defined,
    optional,
    required,
    production,
    string,
    boolean,
    number,
    resolve,
    candidate_sources,
    parse_variables,
)

PRODUCTION = RuntimeContext.PRODUCTION
DEVELOPMENT = RuntimeContext.DEVELOPMENT

class TestCandidateSources:
    env = {"K": "env"}
    file = {"K": "file"}

    def test_default_rule_consults_both_in_any_context(self):
        for context in (PRODUCTION, DEVELOPMENT, None):
            assert candidate_sources(Rule.DEFAULT, self.env, self.file, context) == [self.env, self.file]

    def test_production_rule_in_production_consults_environment_only(self):
        assert candidate_sources(Rule.PRODUCTION, self.env, self.file, PRODUCTION) == [self.env]
        assert candidate_sources(Rule.PRODUCTION, self.env, self.file, "production") == [self.env]

    def test_production_rule_outside_production_falls_back_to_file(self):
        assert candidate_sources(Rule.PRODUCTION, self.env, self.file, DEVELOPMENT) == [self.env, self.file]
        assert candidate_sources(Rule.PRODUCTION, self.env, self.file, "test") == [self.env, self.file]

class TestPrecedence:
    def test_environment_wins_over_file_for_default_rule(self):
        declarations = {"A": required(string)}
        for context in (PRODUCTION, DEVELOPMENT):
            result = resolve(declarations, {"A": "env"}, {"A": "file"}, context)
            assert result["A"] == "env"

    def test_file_is_fallback_for_default_rule(self):
        result = resolve({"A": required(string)}, {}, {"A": "file"}, PRODUCTION)
        assert result["A"] == "file"

    def test_empty_string_in_environment_shadows_file(self):
        result = resolve({"A": optional(string)}, {"A": ""}, {"A": "file"}, DEVELOPMENT)
        assert result["A"] == ""

class TestProduction:
    with_values = {"A_PROD_NUMBER": "123"}
    no_values = {}
    silly_default = {"A_PROD_NUMBER": str(2 ** 53 - 1)}
    declaration = {"A_PROD_NUMBER": production(number)}

    def test_parse_value_normally_in_production(self):
        result = parse_variables(self.declaration)(self.with_values, self.no_values, "production")
        assert result["A_PROD_NUMBER"] == 123

    def test_uses_file_value_when_not_in_production(self):
        result = parse_variables(self.declaration)(self.no_values, self.with_values, "development")
        assert result["A_PROD_NUMBER"] == 123

    def test_ignores_file_value_in_production(self):
        with pytest.raises(CombinedParseVariableError):
            parse_variables(self.declaration)(self.no_values, self.silly_default, "production")

    def test_optional_production_rule_yields_absent_in_production(self):
        declarations = {"A": declare(Rule.PRODUCTION, optional(string).parser)}
        result = resolve(declarations, {}, {"A": "x"}, PRODUCTION)
        assert result["A"] is None

    def test_missing_everywhere_fails_outside_production(self):
        with pytest.raises(CombinedParseVariableError, match="A is invalid: environment variable is not set properly"):
            resolve({"A": production(string)}, {}, {}, DEVELOPMENT)

class TestEndToEnd:
    def test_required_and_optional_mixed_sources(self):
        declarations = {"A": required(string), "B": optional(number)}
        result = resolve(declarations, {"A": "hello"}, {"B": "42"}, DEVELOPMENT)
        assert dict(result) == {"A": "hello", "B": 42}

    def test_production_value_only_in_file_fails_in_production(self):
        with pytest.raises(CombinedParseVariableError) as exc_info:
            resolve({"A": production(string)}, {}, {"A": "x"}, PRODUCTION)
        assert "A is invalid: environment variable is not set properly" in str(exc_info.value)

    def test_empty_string_is_present(self):
        result = resolve({"A": optional(string)}, {"A": ""}, {})
        assert result["A"] == ""

    def test_absent_optional_is_none(self):
        result = resolve({"A": optional(string)}, {}, {})
        assert "A" in result
        assert result["A"] is None

    def test_result_is_read_only(self):
        result = resolve({"A": optional(string)}, {"A": "x"}, {})
        with pytest.raises(TypeError):
            result["A"] = "y"

    def test_result_keeps_declaration_order(self):
        declarations = {"Z": optional(string), "A": optional(string), "M": optional(string)}
        assert list(resolve(declarations, {}, {})) == ["Z", "A", "M"]

    def test_resolution_is_idempotent(self):
        declarations = {"A": required(string), "B": optional(number), "C": production(boolean)}
        environment = {"A": "a", "C": "true"}
        file = {"B": "1.5"}
        first = resolve(declarations, environment, file, PRODUCTION)
        second = resolve(declarations, environment, file, PRODUCTION)
        assert dict(first) == dict(second)
        assert environment == {"A": "a", "C": "true"}
        assert file == {"B": "1.5"}

class TestMultipleValidations:
    declaration = {
        "A_STRING_VALUE": required(string),
        "A_BOOLEAN_VALUE": optional(boolean),
        "A_NUMBER_VALUE": optional(number),
        "PORT": optional(number),
    }
    invalid_config = {
        "A_BOOLEAN_VALUE": "Not a boolean",
        "A_NUMBER_VALUE": str(float("inf")),
        "PORT": "Hex, maybe?",
    }

    def call(self):
        parse_variables(self.declaration)(self.invalid_config, {}, "production")

    def test_lists_number_of_errors_in_message(self):
        with pytest.raises(CombinedParseVariableError, match="There were 4 errors while parsing"):
            self.call()

    def test_contains_all_causing_errors_in_order(self):
        with pytest.raises(CombinedParseVariableError) as exc_info:
            self.call()
        causes = exc_info.value.causes
        assert len(causes) == 4
        assert all(isinstance(c, ParseVariableError) for c in causes)
        assert exc_info.value.keys == ["A_STRING_VALUE", "A_BOOLEAN_VALUE", "A_NUMBER_VALUE", "PORT"]
        assert str(causes[1]) == "A_BOOLEAN_VALUE is invalid: Non-boolean value found: Not a boolean"
        assert causes[1].reason == "Non-boolean value found: Not a boolean"

    def test_message_lists_each_error(self):
        with pytest.raises(CombinedParseVariableError) as exc_info:
            self.call()
        message = str(exc_info.value)
        assert message.startswith("There were 4 errors while parsing. [A_STRING_VALUE is invalid: ")
        assert "PORT is invalid: Non-number value found: Hex, maybe?" in message

class TestParserFailures:
    def test_unexpected_exception_propagates(self):
        def broken(value):
            raise RuntimeError("bug in parser")

        declarations = {"A": optional(string), "B": required(broken), "C": required(string)}
        with pytest.raises(RuntimeError, match="bug in parser"):
            resolve(declarations, {"B": "x"}, {})

    def test_custom_parse_error_is_aggregated(self):
        def port(value):
            n = number(value)
            if not 0 < n < 65536:
                raise ParseVariableError(f"Port out of range: {value}")
            return n

        with pytest.raises(CombinedParseVariableError, match="PORT is invalid: Port out of range: 70000"):
            resolve({"PORT": required(port)}, {"PORT": "70000"}, {})

class TestParseVariables:
    def test_exposes_declarations(self):
        parse = parse_variables({"A": optional(string), "B": required(number)})
        assert parse.keys() == ["A", "B"]
        assert list(parse) == ["A", "B"]
        assert parse.declarations["B"].rule == Rule.DEFAULT

    def test_declarations_are_copied(self):
        declarations = {"A": optional(string)}
        parse = parse_variables(declarations)
        declarations["B"] = required(string)
        assert parse.keys() == ["A"]

    def test_reusable_across_runs(self):
        parse = parse_variables({"A": optional(number)})
        assert parse({"A": "1"}, {})["A"] == 1
        assert parse({}, {"A": "2"})["A"] == 2

    def test_rejects_non_declaration(self):
        with pytest.raises(ConfigurationDeclarationError):
            parse_variables({"A": string})

    def test_rejects_unknown_rule(self):
        with pytest.raises(ConfigurationDeclarationError, match="A has an unknown rule: 'prod'"):
            parse_variables({"A": Declaration("prod", string)})

    def test_normalizes_plain_string_rule(self):
        parse = parse_variables({"A": Declaration("production", defined(string))})

        assert parse.declarations["A"].rule is Rule.PRODUCTION
        with pytest.raises(CombinedParseVariableError):
            parse({}, {"A": "x"}, PRODUCTION)

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigurationDeclarationError):
            parse_variables([("A", optional(string))])
