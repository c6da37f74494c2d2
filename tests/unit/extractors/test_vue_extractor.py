"""Vueコンポーネント構造抽出とバージョン推定のユニットテスト。"""

from pattern_police.extractors.vue import extract_component
from pattern_police.parsers.sfc import parse_sfc


def _extract(code: str, filename: str = "Component.vue"):  # type: ignore[no-untyped-def]
    return extract_component(parse_sfc(code, filename))


_SCRIPT_SETUP = """<template>
  <div>{{ id }}</div>
</template>

<script setup lang="ts">
const props = defineProps<{ id: number }>()
</script>
"""

_OPTIONS_VUE2 = """<template>
  <ul><li v-for="item in items" :key="item.id">{{ item.name | upper }}</li></ul>
</template>

<script>
import Loggable from './mixins/loggable'

export default {
  name: 'ItemList',
  mixins: [Loggable, Trackable],
  props: ['title', 'count'],
  data() {
    return { items: [], loading: false }
  },
  computed: {
    total() { return this.items.length },
  },
  watch: {
    'items.length'(value) {},
  },
  methods: {
    async load() {},
    reset() {},
  },
  filters: {
    upper(value) { return value.toUpperCase() },
  },
  beforeDestroy() {},
}
</script>
"""


class TestScriptSetupComponent:
    def test_version_three_and_props(self) -> None:
        component = _extract(_SCRIPT_SETUP, "UserCard.vue")
        assert component.name == "UserCard"
        assert component.version == "3"
        assert component.is_script_setup
        assert component.has_typescript
        assert component.props == ["id"]
        assert component.uses_composition_api
        assert not component.uses_options_api

    def test_interface_props_and_emits(self) -> None:
        code = """<script setup lang="ts">
interface Props {
  title: string
  items?: string[]
}
const props = defineProps<Props>()
const emit = defineEmits<{ (e: 'update-value', v: string): void; (e: 'close'): void }>()
const { count } = useCounter()
</script>
"""
        component = _extract(code)
        assert component.props == ["title", "items"]
        assert component.emits == ["update-value", "close"]
        assert component.composables == ["useCounter"]

    def test_runtime_array_macros(self) -> None:
        code = "<script setup>\ndefineProps(['a', 'b'])\ndefineEmits(['save'])\n</script>\n"
        component = _extract(code)
        assert component.props == ["a", "b"]
        assert component.emits == ["save"]


class TestOptionsApiComponent:
    def test_sections_extracted(self) -> None:
        component = _extract(_OPTIONS_VUE2, "ItemList.vue")
        assert component.mixins == ["Loggable", "Trackable"]
        assert component.props == ["title", "count"]
        assert component.data == ["items", "loading"]
        assert component.computed == ["total"]
        assert component.watch == ["items.length"]
        assert component.methods == ["load", "reset"]
        assert component.filters == ["upper"]
        assert component.imports == ["./mixins/loggable"]

    def test_version_two(self) -> None:
        component = _extract(_OPTIONS_VUE2)
        assert component.uses_options_api
        assert not component.uses_composition_api
        assert component.version == "2"

    def test_setup_function_means_version_three(self) -> None:
        code = """<script>
import { ref } from 'vue'
export default {
  mixins: [Loggable],
  setup() {
    const count = ref(0)
    return { count }
  },
}
</script>
"""
        component = _extract(code)
        assert component.version == "3"
        assert component.mixins == ["Loggable"]

    def test_define_component_wrapper(self) -> None:
        code = "<script>\nexport default defineComponent({\n  methods: { open() {} },\n})\n</script>\n"
        component = _extract(code)
        assert component.methods == ["open"]


class TestVersionInference:
    def test_teleport_in_template(self) -> None:
        component = _extract("<template><Teleport to='body'><div/></Teleport></template>")
        assert component.version == "3"

    def test_no_signals_is_unknown(self) -> None:
        component = _extract("<template><div>static</div></template>")
        assert component.version == "unknown"

    def test_composition_signal_wins_over_legacy_hook(self) -> None:
        code = "<script>\nimport { computed } from 'vue'\nexport default {\n  destroyed() {},\n}\n</script>\n"
        assert _extract(code).version == "3"
