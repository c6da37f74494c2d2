"""TypeScriptValidatorのユニットテスト。"""

import pytest
from pydantic import ValidationError

from pattern_police.models.rules import TypeScriptRuleConfig
from pattern_police.validators.typescript import TypeScriptValidator, to_camel_case, to_pascal_case


def _validator(**rules: dict[str, object]) -> TypeScriptValidator:
    return TypeScriptValidator(TypeScriptRuleConfig.model_validate({"rules": rules}))


def _rules(report) -> list[str]:  # type: ignore[no-untyped-def]
    return [v.rule for v in report.violations]


class TestCaseConversion:
    def test_to_camel_case(self) -> None:
        assert to_camel_case("bad_snake_case") == "badSnakeCase"

    def test_to_pascal_case(self) -> None:
        assert to_pascal_case("user_service") == "UserService"


class TestNaming:
    def test_snake_case_const_suggests_camel_case(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("const bad_snake_case = 1;")
        naming = [v for v in report.violations if v.rule == "naming-const-convention"]
        assert len(naming) == 1
        assert "bad_snake_case" in naming[0].message
        assert naming[0].suggestion is not None
        assert "badSnakeCase" in naming[0].suggestion
        assert naming[0].severity == "info"

    def test_upper_case_const_is_allowed(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("export const MAX_RETRIES = 3;")
        assert "naming-const-convention" not in _rules(report)

    def test_class_must_be_pascal_case(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("export class user_service {}")
        violation = next(v for v in report.violations if v.rule == "naming-class-pascalcase")
        assert violation.line == 1
        assert violation.suggestion is not None and "UserService" in violation.suggestion

    def test_function_and_method_names(self, typescript_validator: TypeScriptValidator) -> None:
        code = """
export function Load_Data() {}
export class Store {
  constructor() {}
  get Size() { return 0; }
  Save_All() {}
}
"""
        rules = _rules(typescript_validator.validate(code))
        assert rules.count("naming-function-camelcase") == 1
        # constructorとgetterは対象外
        assert rules.count("naming-method-camelcase") == 1

    def test_disabled_naming_reports_nothing(self) -> None:
        validator = _validator(naming={"enabled": False})
        report = validator.validate("export class user_service {}\nexport const bad_name = 1;")
        assert not [v for v in report.violations if v.category == "naming"]

    def test_object_literal_methods_are_not_checked(self, typescript_validator: TypeScriptValidator) -> None:
        code = "export const api = {\n  Fetch_All() { return 1; },\n};\n"
        assert "naming-method-camelcase" not in _rules(typescript_validator.validate(code))

    def test_class_methods_are_still_checked(self, typescript_validator: TypeScriptValidator) -> None:
        code = "export class Api {\n  Fetch_All() { return 1; }\n}\n"
        violation = next(
            v for v in typescript_validator.validate(code).violations if v.rule == "naming-method-camelcase"
        )
        assert violation.line == 2


class TestConfiguredNamingStyles:
    def test_function_style_follows_configuration(self) -> None:
        validator = _validator(naming={"patterns": {"functions": "snake_case"}})
        code = "export function load_user() {}\nexport function loadUser() {}\n"
        violations = [v for v in validator.validate(code).violations if v.rule == "naming-function-camelcase"]
        assert len(violations) == 1
        assert "loadUser" in violations[0].message
        assert "snake_case" in violations[0].message
        assert violations[0].suggestion is not None and "load_user" in violations[0].suggestion

    def test_class_style_follows_configuration(self) -> None:
        validator = _validator(naming={"patterns": {"classes": "camelCase"}})
        assert "naming-class-pascalcase" not in _rules(validator.validate("export class userService {}"))
        assert "naming-class-pascalcase" in _rules(validator.validate("export class UserService {}"))

    def test_const_accepts_configured_constant_style(self) -> None:
        validator = _validator(naming={"patterns": {"constants": "snake_case"}})
        assert "naming-const-convention" not in _rules(validator.validate("export const max_retries = 3;"))
        assert "naming-const-convention" in _rules(validator.validate("export const MAX_Retries = 3;"))

    def test_unknown_style_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeScriptRuleConfig.model_validate({"rules": {"naming": {"patterns": {"classes": "kebab-case"}}}})


class TestSolid:
    def test_god_class_reports_method_count(self, typescript_validator: TypeScriptValidator) -> None:
        methods = "\n".join(f"  method{i}() {{ return {i}; }}" for i in range(11))
        code = f"export class Manager {{\n  constructor() {{}}\n{methods}\n}}\n"
        report = typescript_validator.validate(code)
        god = [v for v in report.violations if v.rule == "solid-god-class"]
        assert len(god) == 1
        assert "11" in god[0].message
        assert god[0].evidence == ["11個のメソッド"]

    def test_ten_methods_is_not_a_god_class(self, typescript_validator: TypeScriptValidator) -> None:
        methods = "\n".join(f"  method{i}() {{ return {i}; }}" for i in range(10))
        report = typescript_validator.validate(f"export class Manager {{\n{methods}\n}}\n")
        assert "solid-god-class" not in _rules(report)

    @pytest.mark.parametrize("maximum", [1, 3, 5, 8])
    def test_parameter_threshold_is_exclusive(self, maximum: int) -> None:
        validator = _validator(solid={"max_parameters": maximum})

        def function_with(count: int) -> str:
            params = ", ".join(f"p{i}" for i in range(count))
            return f"export function run({params}) {{ return [{params}]; }}"

        at_limit = validator.validate(function_with(maximum))
        over_limit = validator.validate(function_with(maximum + 1))
        assert "solid-too-many-parameters" not in _rules(at_limit)
        assert _rules(over_limit).count("solid-too-many-parameters") == 1

    def test_arrow_function_uses_variable_name(self) -> None:
        validator = _validator(solid={"max_parameters": 1})
        report = validator.validate("export const add = (a: number, b: number) => a + b;")
        violation = next(v for v in report.violations if v.rule == "solid-too-many-parameters")
        assert "add" in violation.message

    def test_long_function_gated_by_detect_long_methods(self) -> None:
        body = "\n".join(f"  const v{i} = {i};" for i in range(6))
        code = f"export function compute() {{\n{body}\n  return v0 + v1 + v2 + v3 + v4 + v5;\n}}\n"

        enabled = _validator(solid={"max_function_lines": 3})
        assert "solid-function-too-long" in _rules(enabled.validate(code))

        disabled = _validator(solid={"max_function_lines": 3}, code_smells={"detect_long_methods": False})
        assert "solid-function-too-long" not in _rules(disabled.validate(code))

    def test_long_method_rule_id(self) -> None:
        body = "\n".join(f"    this.v{i} = {i};" for i in range(6))
        code = f"export class A {{\n  fill() {{\n{body}\n  }}\n}}\n"
        report = _validator(solid={"max_function_lines": 3}).validate(code)
        assert "solid-method-too-long" in _rules(report)


class TestCodeSmells:
    def test_unused_variable(self, typescript_validator: TypeScriptValidator) -> None:
        code = "const used = 1;\nconst unused = 2;\nconsole.log(used);\n"
        report = typescript_validator.validate(code)
        unused = [v for v in report.violations if v.rule == "code-smell-unused-variable"]
        assert [v.line for v in unused] == [2]
        assert "unused" in unused[0].message

    def test_shorthand_property_counts_as_usage(self, typescript_validator: TypeScriptValidator) -> None:
        code = "const name = 'a';\nexport const payload = { name };\n"
        report = typescript_validator.validate(code)
        messages = [v.message for v in report.violations if v.rule == "code-smell-unused-variable"]
        assert not any("'name'" in m for m in messages)

    def test_duplicated_lines(self, typescript_validator: TypeScriptValidator) -> None:
        line = 'console.log("duplicated line here!");'
        report = typescript_validator.validate("\n".join([line, line, "", line]))
        duplication = [v for v in report.violations if v.rule == "code-smell-duplication"]
        assert len(duplication) == 1
        assert duplication[0].evidence == ["line 1", "line 2", "line 4"]

    def test_lack_of_comments(self, typescript_validator: TypeScriptValidator) -> None:
        code = "\n".join(f"console.log({i});" for i in range(60))
        assert "code-smell-lack-of-comments" in _rules(typescript_validator.validate(code))

    def test_disabled_code_smells(self) -> None:
        validator = _validator(code_smells={"enabled": False})
        code = "\n".join(f"console.log({i});" for i in range(60))
        assert not [v for v in validator.validate(code).violations if v.category == "code_smells"]


class TestParseAndDeterminism:
    def test_syntax_error_yields_single_violation(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("function broken( {\n  return 1;\n")
        assert len(report.violations) == 1
        assert report.violations[0].rule == "parse-error"
        assert report.violations[0].category == "parse"

    def test_tsx_file_uses_jsx_grammar(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("export const App = () => <div>hi</div>;", "App.tsx")
        assert "parse-error" not in _rules(report)

    def test_repeated_validation_is_identical(self, typescript_validator: TypeScriptValidator) -> None:
        code = "export class user_service {\n  Do_It(a, b, c, d, e, f) { const tmp_value = 1; }\n}\n"
        first = typescript_validator.validate(code).model_dump()
        second = typescript_validator.validate(code).model_dump()
        assert first == second

    def test_counts_by_severity(self, typescript_validator: TypeScriptValidator) -> None:
        report = typescript_validator.validate("const bad_snake_case = 1;")
        assert report.count("info") >= 1
        assert report.count("error") == 0
        total = report.count("error") + report.count("warning") + report.count("info")
        assert total == len(report.violations)
