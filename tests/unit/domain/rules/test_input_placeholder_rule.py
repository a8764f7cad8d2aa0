"""Unit tests for rule 5 (InputPlaceholderRule)."""

import pytest

from ux_commit_check.domain.rules.input_placeholder import InputPlaceholderRule

PROFILE_FORM = """
import { Form, Input, Select } from 'antd';

export default function Profile() {
  return (
    <Form>
      <Form.Item label="Name">
        <Input />
      </Form.Item>
      <Form.Item label="City">
        <Select placeholder="请选择城市" />
      </Form.Item>
    </Form>
  );
}
"""


@pytest.fixture
def rule(config) -> InputPlaceholderRule:
    return InputPlaceholderRule(config.rule(5))


class TestInputPlaceholderRule:
    def test_input_without_placeholder_is_reported(self, rule, make_unit, find_line) -> None:
        unit = make_unit("src/Profile.jsx", PROFILE_FORM)
        violations = rule.evaluate("src/Profile.jsx", unit, "")
        assert [(v.rule, v.symbol) for v in violations] == [(5, "missing-placeholder")]
        assert violations[0].line == find_line(PROFILE_FORM, "<Input />")
        assert "<Input>" in violations[0].message

    def test_every_input_with_placeholder_passes(self, rule, make_unit) -> None:
        unit = make_unit("src/Profile.jsx", PROFILE_FORM.replace("<Input />", '<Input placeholder="请输入姓名" />'))
        assert rule.evaluate("src/Profile.jsx", unit, "") == []

    def test_dotted_sub_components(self, rule, make_unit) -> None:
        source = "const f = (\n  <div>\n    <Input.Password />\n    <Select.Option value=\"a\">A</Select.Option>\n  </div>\n);\n"
        unit = make_unit("src/Pwd.jsx", source)
        violations = rule.evaluate("src/Pwd.jsx", unit, "")
        assert [v.line for v in violations] == [3]

    def test_spread_props_may_carry_placeholder(self, rule, make_unit) -> None:
        unit = make_unit("src/Profile.jsx", PROFILE_FORM.replace("<Input />", "<Input {...inputProps} />"))
        assert rule.evaluate("src/Profile.jsx", unit, "") == []

    @pytest.mark.parametrize(("input_type", "reported"), [("text", True), ("email", True), ("checkbox", False), ("hidden", False)])
    def test_native_input_types(self, rule, make_unit, input_type: str, reported: bool) -> None:
        unit = make_unit("public/form.html", f'<form>\n  <input type="{input_type}" name="x">\n</form>\n')
        violations = rule.evaluate("public/form.html", unit, "")
        assert bool(violations) is reported

    def test_vue_element_input(self, rule, make_unit) -> None:
        source = """
        <template>
          <el-form>
            <el-input v-model="form.name" />
            <el-input v-model="form.phone" :placeholder="$t('phone')" />
          </el-form>
        </template>
        """
        unit = make_unit("src/Edit.vue", source)
        violations = rule.evaluate("src/Edit.vue", unit, "")
        assert [v.line for v in violations] == [3]

    def test_commented_out_input_is_ignored(self, rule, make_unit) -> None:
        source = "<template>\n  <div>\n    <!-- <el-input v-model=\"x\" /> -->\n  </div>\n</template>\n"
        unit = make_unit("src/Edit.vue", source)
        assert rule.evaluate("src/Edit.vue", unit, "") == []

    def test_placeholder_text_attribute(self, rule, make_unit) -> None:
        unit = make_unit("src/D.jsx", "const d = <DatePicker placeholderText=\"选择日期\" />;\n")
        assert rule.evaluate("src/D.jsx", unit, "") == []

    def test_whitelisted_by_attribute_value(self, config_with, make_unit) -> None:
        configuration = config_with(rule5={"whitelist": {"keywords": ["readonly-field"]}})
        unit = make_unit("src/R.jsx", 'const r = <Input className="readonly-field" />;\n')
        assert InputPlaceholderRule(configuration.rule(5)).evaluate("src/R.jsx", unit, "") == []

    def test_only_added_inputs_in_modified_file(self, rule, make_unit) -> None:
        source = "const f = (\n  <div>\n    <Input />\n    <Select />\n  </div>\n);\n"
        diff = (
            "diff --git a/src/F.jsx b/src/F.jsx\n"
            "--- a/src/F.jsx\n"
            "+++ b/src/F.jsx\n"
            "@@ -3,1 +3,2 @@\n"
            "     <Input />\n"
            "+    <Select />\n"
        )
        unit = make_unit("src/F.jsx", source, diff)
        violations = rule.evaluate("src/F.jsx", unit, diff)
        assert [v.line for v in violations] == [4]

    def test_modified_file_without_markup_changes(self, rule, make_unit) -> None:
        source = "const f = <Input />;\nconst n = 1;\n"
        diff = "--- a/src/F.jsx\n+++ b/src/F.jsx\n@@ -2,1 +2,1 @@\n-const n = 0;\n+const n = 1;\n"
        unit = make_unit("src/F.jsx", source, diff)
        assert rule.evaluate("src/F.jsx", unit, diff) is None

    def test_custom_input_components(self, config_with, make_unit) -> None:
        configuration = config_with(rule5={"customKeywords": {"inputComponents": ["MyInput"]}})
        unit = make_unit("src/C.jsx", "const c = (\n  <div>\n    <MyInput />\n    <Input />\n  </div>\n);\n")
        violations = InputPlaceholderRule(configuration.rule(5)).evaluate("src/C.jsx", unit, "")
        assert [v.line for v in violations] == [3]

    def test_is_input_component(self, rule) -> None:
        assert rule.is_input_component("Input")
        assert rule.is_input_component("Input.TextArea")
        assert rule.is_input_component("el-select")
        assert not rule.is_input_component("Form.Item")
        assert not rule.is_input_component("el-option")
        assert not rule.is_input_component("InputNumberX")
