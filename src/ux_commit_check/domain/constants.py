"""Shared vocabularies for the checker: rule labels, token lists and defaults."""

CONFIG_FILE_NAMES: tuple[str, ...] = (
    "ux-commit-check.yaml",
    "ux-commit-check.yml",
    ".ux-commit-check.yaml",
)
PYPROJECT_TOOL_KEY: str = "ux-commit-check"

RULE_NUMBERS: tuple[int, ...] = (1, 2, 3, 4, 5)
CRASH_SENTINEL_RULE: int = 0

RULE_LABELS: dict[int, str] = {
    0: "检查器内部错误",
    1: "防重复提交缺失",
    2: "首次进入页面缺失 loading 状态",
    3: "接口操作成功后缺失轻提示",
    4: "非 Table 列表缺失自定义空状态",
    5: "表单输入项缺失 placeholder 提示",
}

# Call classification
HTTP_VERBS: tuple[str, ...] = ("post", "get", "put", "delete", "patch", "request")
CAPITALIZED_HTTP_VERBS: frozenset[str] = frozenset({"Post", "Get", "Put", "Delete", "Patch"})
LOG_TOKENS: tuple[str, ...] = ("console", "log", "warn", "error", "debug", "info")
SERIALIZATION_TOKENS: tuple[str, ...] = ("parse", "stringify")
XHR_METHODS: frozenset[str] = frozenset({"open", "send", "setRequestHeader"})
ACTION_SUFFIX: str = "Action"

# Promise and effect vocabulary
PROMISE_CALLBACK_METHODS: frozenset[str] = frozenset({"then", "catch", "finally"})
EFFECT_HOOKS: frozenset[str] = frozenset({"useEffect", "useLayoutEffect", "onMounted"})
LIFECYCLE_METHODS: frozenset[str] = frozenset({"componentDidMount", "created", "mounted"})
RATE_LIMITERS: frozenset[str] = frozenset({"debounce", "throttle"})
MIN_RATE_LIMIT_DELAY_MS: int = 500
LOADING_NAME_TOKENS: tuple[str, ...] = ("loading", "submitting")

# Cross-file action resolution
DEFAULT_DECLARE_FUNCTION: str = "declareRequest"
DEFINE_NAMESPACE_FUNCTION: str = "defineNamespace"
NAMESPACE_IMPORT_TOKENS: tuple[str, ...] = ("namespace", "enumerate")
NAMESPACE_CONSTANT_PREFIX: str = "NS_"
PATH_ALIASES: dict[str, str] = {"~/": "src/", "@/": "src/"}
SCRIPT_EXTENSIONS: tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx")
NAMESPACE_PROBE_DIRS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("src/api", (".js", ".ts", ".jsx", ".tsx")),
    ("src/models", (".js", ".ts")),
    ("src/services", (".js", ".ts")),
)
SEARCH_EXCLUDED_DIRS: frozenset[str] = frozenset({"node_modules", "dist", "build", ".git"})
SEARCH_NAME_PREFIXES: tuple[str, ...] = ("action", "api", "service")

# Rule 1
RULE1_DIFF_TOKENS: tuple[str, ...] = (
    "button", "Button", "@click", "onClick", "onOk", "onConfirm",
    "onFinish", "htmlType", "Modal", "Drawer", "Popconfirm", "Form",
)
LOADING_ATTRIBUTES: frozenset[str] = frozenset({"loading", "confirmLoading", "disabled"})

# Rule 2
RULE2_DIFF_TOKENS: tuple[str, ...] = (
    "created", "mounted", "useEffect", "useLayoutEffect", "componentDidMount", "onMounted",
)
LIST_PAGE_TOKENS: tuple[str, ...] = ("el-table", "<Table", ".map(", "v-for")
DETAIL_PAGE_TOKENS: tuple[str, ...] = ("getDetail", "fetchDetail", "queryDetail", "详情")
SPINNER_ATTRIBUTES: frozenset[str] = frozenset({"spinning", "loading", "v-loading"})
PROPS_SOURCES: tuple[str, ...] = ("props", "this.props")

# Rule 3
MUTATION_VERBS: tuple[str, ...] = ("POST", "PUT", "DELETE", "PATCH")
DISPATCH_MUTATION_KEYWORDS: tuple[str, ...] = (
    "add", "create", "update", "edit", "delete", "remove", "submit", "save",
)
ACTION_MUTATION_KEYWORDS: tuple[str, ...] = DISPATCH_MUTATION_KEYWORDS + ("copy", "post", "put")
EXCLUDED_METHOD_NAMES: tuple[str, ...] = ("toString", "includes", "input", "output")

# Rule 4
TABLE_COMPONENTS: frozenset[str] = frozenset({"Table", "el-table", "a-table", "ElTable"})
EMPTY_TEXT_MARKERS: tuple[str, ...] = ("暂无数据", "暂无", "no data", "No Data", "No data")
LIST_LOOP_METHODS: frozenset[str] = frozenset({"map", "forEach"})
LOOP_STATEMENTS: frozenset[str] = frozenset({"for_statement", "for_in_statement"})

# Rule 5
NON_LEAF_COMPONENTS: frozenset[str] = frozenset(
    {
        "Select.Option",
        "Select.OptGroup",
        "AutoComplete.Option",
        "Form.Item",
        "Form.List",
        "Input.Group",
        "Radio.Group",
        "Checkbox.Group",
        "TreeSelect.TreeNode",
        "el-option",
        "el-option-group",
        "el-form-item",
        "option",
        "optgroup",
    }
)
PLACEHOLDERLESS_INPUT_TYPES: frozenset[str] = frozenset(
    {"hidden", "checkbox", "radio", "submit", "button", "file", "reset", "image", "range", "color"}
)
