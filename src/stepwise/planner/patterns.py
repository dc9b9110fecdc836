"""
Pattern Table: ordered regex rules mapping step text to action plans.

Provides:
- PatternRule: one (action type, regex, capture mapping) entry
- GENERAL_RULES: the general rule set used by the Step Planner
- TABLE_RULES: table/window/frame/alert/slider/tooltip rules with named fields
- COMBINED_ACTION_RULES: multi-action shapes recognised as a single step

Both tables are built once at import time and never mutated. Rules are
tried strictly in the order they appear; the first regex that matches wins.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Optional Gherkin keyword followed by an optional subject pronoun
PREFIX = r"^(?:given|when|then|and|but)?\s*(?:I|user|we|he|she|they)?\s*"
_ROW_PREFIX = r"^(?:when|and|then)?\s*(?:I|user|we|he|she|they)?\s*"
_THEN_PREFIX = r"^(?:then|and|when)?\s*"
_PRONOUN_PREFIX = r"^(?:I|user|we|he|she|they)?\s*"


@dataclass(frozen=True)
class PatternRule:
    """
    A single Pattern Table entry.

    Positional rules map capture groups to element name, value and row
    anchor. Table rules instead carry ``fields``: a mapping from ActionPlan
    attribute name to either a group index or a constant string.
    """

    action_type: str
    regex: re.Pattern[str]
    element_group: int | None = None
    value_group: int | None = None
    row_anchor_group: int | None = None
    fields: Mapping[str, int | str] = field(default_factory=lambda: MappingProxyType({}))
    collect_quoted: bool = False

    def search(self, text: str) -> re.Match[str] | None:
        return self.regex.search(text)

    def fullmatch(self, text: str) -> re.Match[str] | None:
        return self.regex.fullmatch(text)


def _rule(
    action_type: str,
    pattern: str,
    element: int | None = None,
    value: int | None = None,
    row_anchor: int | None = None,
    *,
    collect_quoted: bool = False,
) -> PatternRule:
    return PatternRule(
        action_type=action_type,
        regex=re.compile(pattern, re.IGNORECASE),
        element_group=element,
        value_group=value,
        row_anchor_group=row_anchor,
        collect_quoted=collect_quoted,
    )


def _table(action_type: str, pattern: str, **fields: int | str) -> PatternRule:
    return PatternRule(
        action_type=action_type,
        regex=re.compile(pattern, re.IGNORECASE),
        fields=MappingProxyType(dict(fields)),
    )


# =============================================================================
# General rules (Step Planner)
# =============================================================================

_CLICK_AND_SWITCH = PREFIX + r"""(?:click|tap)\s+(?:on\s+)?(?:the\s+)?["']?([^"']+?)["']?\s*(?:link|button|icon|element|img)?\s*(?:and|&)\s*(?:switch|navigate|go)\s+to\s+(?:the\s+)?(?:new|second|latest)\s+(?:window|tab)"""

GENERAL_RULES: tuple[PatternRule, ...] = (
    # Navigation
    _rule("click_and_switch_window", _CLICK_AND_SWITCH, element=1),
    _rule(
        "navigate",
        PREFIX + r"""(?:open|go to|navigate to|launch|visit)\s+(?:the\s+)?(?:url|website|site|page)?\s*["']?([^"']+)["']?""",
        element=1,
    ),
    _rule(
        "navigate_app",
        PREFIX + r"(?:open|launch)\s+(?:the\s+)?browser\s+and\s+navigate\s+to\s+(.+)$",
        element=1,
    ),
    # Scrolling
    _rule(
        "scroll",
        PREFIX + r"(?:scroll|move)\s+(?:to\s+)?(top|bottom|middle|start|end)(?:\s+(?:of|on)\s+(?:the\s+)?(?:page|screen|window))?$",
        value=1,
    ),
    _rule(
        "scroll",
        PREFIX + r"(?:scroll|move)\s+(down|up|left|right)(?:\s+by)?\s+(\d+)(?:\s*(?:px|pixels?))?",
        element=1,
        value=2,
    ),
    _rule(
        "scroll",
        PREFIX + r"""(?:scroll|move)\s+(?:to\s+)?(top|bottom|left|right|down|up)(?:\s+of|\s+in|\s+inside)\s+["']?([^"']+)["']?$""",
        element=2,
        value=1,
    ),
    _rule(
        "scroll",
        PREFIX + r"""(?:scroll|move)\s+(?:to|into|until)\s+(?:view\s+of\s+)?(?:the\s+)?["']?(.+?)["']?$""",
        element=1,
    ),
    # Form helpers
    _rule(
        "fill_autocomplete",
        PREFIX + r"""(?:enter|type|select)s?\s+(.+?)\s+["']([^"']+)["']\s+from\s+(?:suggestion|dropdown|list|autocomplete)$""",
        element=1,
        value=2,
    ),
    _rule(
        "select_date_relative",
        PREFIX + r"selects?\s+(.+?)\s+(\d+)\s+days?\s+from\s+(today|tomorrow)$",
        element=1,
        value=2,
    ),
    _rule(
        "set_date",
        PREFIX + r"""(?:set|select|enter)\s+(?:the\s+)?(?:date\s+)?["'](\d{1,4}[-/.]\d{1,2}[-/.]\d{1,4})["']\s+(?:in|for|into|to)\s+(?:the\s+)?(?:date\s+picker|field|input)?\s*["']?([^"']+)["']?$""",
        element=2,
        value=1,
    ),
    _rule(
        "set_date",
        PREFIX + r"""(?:set|select|enter)\s+(?:the\s+)?(?:date\s+)?(?:of\s+)?(today|tomorrow|yesterday)\s+(?:in|for|into|to)\s+(?:the\s+)?["']?([^"']+)["']?$""",
        element=2,
        value=1,
    ),
    _rule("fill_credentials", PREFIX + r"enters?\s+username\s+and\s+password$"),
    _rule(
        "select_with_criteria",
        PREFIX + r"""select\s+(?:the\s+)?(.+?)\s+from\s+["']([^"']+)["']\s+with\s+(.+?)\s+["']([^"']+)["']$""",
        element=1,
        value=2,
    ),
    _rule("fill_form_section", PREFIX + r"add\s+(.+?)\s+details$", element=1),
    _rule(
        "toggle_setting",
        PREFIX + r"(enable|disable)\s+(.+?)(?:\s+in\s+(.+))?$",
        element=2,
        value=1,
    ),
    _rule("store_context", PREFIX + r"store\s+(?:the\s+)?(.+?)(?:\s+as\s+(.+))?$", element=1, value=2),
    _rule("enter_stored_reference", PREFIX + r"enters?\s+booking\s+reference$"),
    # Screenshots and waits
    _rule("screenshot", PREFIX + r"(?:take|capture)\s+(?:a\s+)?(?:screen\s?shot|snap\s?shot)"),
    _rule("wait_time", PREFIX + r"(?:wait|pause)(?:\s+for)?\s+(\d+)\s*(?:second|sec|s)(?:s)?", element=1),
    _rule(
        "wait_disappear",
        PREFIX + r"""(?:wait|pause)(?:\s+for|\s+until)?\s+["']?([^"']+)["']?\s+(?:to\s+)?(?:disappear|hide|be\s+hidden|is\s+gone|vanish|not\s+visible)""",
        element=1,
    ),
    _rule(
        "wait_appear",
        PREFIX + r"""(?:wait|pause)(?:\s+for|\s+until)?\s+["']?([^"']+)["']?\s+(?:to\s+)?(?:appear|show|be\s+visible|is\s+visible|display|be\s+displayed)""",
        element=1,
    ),
    _rule(
        "wait_page",
        PREFIX + r"(?:wait|pause)(?:\s+for)?\s+(?:page|network)(?:\s+to)?(?:\s+be)?(?:\s+)?(?:load(?:ed)?(?:\s+completed)?|idle|ready)",
    ),
    _rule(
        "wait_for_progress",
        r"""(?:wait|pause|monitor).*?(progress|loading).*?(?:until\s+reach|until|reach|to|is|be)\s+["']([^"']+)["']""",
        element=1,
        value=2,
    ),
    # Keyboard and browser history (before the click rules)
    _rule(
        "press_key",
        PREFIX + r"(?:press|hit|type)\s+(Escape|Enter|Tab|Space|Delete|Backspace|ArrowUp|ArrowDown|ArrowLeft|ArrowRight)(?:\s+key)?(?:\s+to\s+.+)?$",
        element=1,
    ),
    _rule("refresh_page", PREFIX + r"(?:refresh|reload)(?:\s+(?:the|current))?\s+(?:page|browser|screen)$"),
    _rule(
        "browser_back",
        PREFIX + r"(?:go|navigate|move|browser|click|press)?\s*(?:browser\s*)?back(?:wards?)?\s*(?:button|icon)?$",
    ),
    _rule(
        "browser_forward",
        PREFIX + r"(?:go|navigate|move|browser|click|press)?\s*(?:browser\s*)?forward(?:s)?\s*(?:button|icon)?$",
    ),
    _rule(
        "verify_validation",
        PREFIX + r"""(?:verify|check|ensure)\s+(?:the\s+)?["']?([^"']+)["']?\s+(?:field|box|input)?\s*(?:is\s+invalid|has\s+red\s+border|shows\s+error|is\s+required)$""",
        element=1,
    ),
    # Alerts, confirms and prompts
    _rule(
        "verify_alert",
        PREFIX + r"""(?:verify|check|assert)\s+(?:alert|popup|dialog)\s+(?:says|shows|displays|contains|has|message)\s+["']([^"']+)["']""",
        value=1,
    ),
    _rule(
        "accept_alert",
        PREFIX + r"""(?:accept|ok|confirm|close)\s+(?:alert|popup|dialog)(?:\s+with)?(?:\s+message)?(?:\s+)?["']?([^"']*)["']?$""",
        value=1,
    ),
    _rule(
        "accept_alert",
        PREFIX + r"""(?:verify\s+and\s+)?(?:accept|ok|confirm)\s+(?:alert|popup|dialog)\s+(?:with|having)?\s+["']([^"']+)["']""",
        value=1,
    ),
    _rule("accept_alert", PREFIX + r"(?:accept|ok|click\s+ok|confirm)\s+(?:confirm|confirmation)"),
    _rule("dismiss_alert", PREFIX + r"(?:dismiss|cancel|close|reject)\s+(?:alert|confirm|popup|dialog|confirmation)"),
    _rule(
        "prompt_alert",
        PREFIX + r"""(?:enter|type|input|provide)\s+["']([^"']+)["']\s+(?:in|into|to)\s+(?:prompt|input\s+dialog)""",
        value=1,
    ),
    _rule("dismiss_prompt", PREFIX + r"(?:dismiss|cancel|close)\s+(?:prompt|input\s+dialog)"),
    # Row-scoped actions
    _rule(
        "click",
        _ROW_PREFIX + r"""(?:click|tap)\s+["']([^"']+)["']\s+(?:in|for|at|on)\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["']""",
        element=1,
        row_anchor=2,
    ),
    _rule(
        "fill",
        _ROW_PREFIX + r"""(?:enter|fill|type)\s+["']([^"']+)["']\s+(?:in|into|for)\s+["']([^"']+)["']\s+(?:in|for|at)\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["']""",
        element=2,
        value=1,
        row_anchor=3,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:verify|assert)\s+["']([^"']+)["']\s+is\s+displayed\s+(?:in|for|at)\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["']""",
        value=1,
        row_anchor=2,
    ),
    # Page-level verification
    _rule(
        "verify_page_title",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?page\s+title\s+(?:is|contains|equals|has|matches)\s+["']?([^"']+)["']?$""",
        value=1,
    ),
    _rule(
        "verify_url",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure|assert)\s+(?:that\s+)?(?:the\s+)?(?:current\s+)?URL\s+(?:contains|is|exactly|is\s+exactly|starts\s+with|has|matches|equals)\s+["']?([^"']+)["']?(?:\s+again|\s+viewed|\s+now)?$""",
        value=1,
    ),
    _rule(
        "verify_url",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure|assert)\s+(?:that\s+)?(?:the\s+)?(?:URL\s+)?(path|domain|hash|parameter|query)\s+(?:is|contains|equals|matches)\s+["']?([^"']+)["']?(?:\s+again|\s+now)?$""",
        value=2,
    ),
    _rule(
        "verify_selected",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:the\s+)?active\s+menu\s+item\s+(?:is|should\s+be)\s+["']([^"']+)["']$""",
        element=1,
    ),
    # Selection verification and list multiselect
    _rule(
        "multiselect_item",
        PREFIX + r"""select\s+(?:multiple\s+items\s+|items\s+)?["']([^"']+)["'](?:\s+from\s+(?:list|grid|table))?$""",
        value=1,
    ),
    _rule(
        "verify_selected",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:items\s+)?["']([^"']+)["']\s+are\s+(?:selected|checked)$""",
        element=1,
    ),
    _rule(
        "verify_selected",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is|should\s+be|are)\s+(?:selected|checked)$",
        element=1,
    ),
    _rule(
        "verify_not_selected",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is|should\s+be|are)\s+(?:not|un)\s*(?:selected|checked)$",
        element=1,
    ),
    _rule(
        "verify_url",
        _THEN_PREFIX + r"(?:validate|verify|check|ensure|assert)\s+(?:that\s+)?(?:I'm\s+|I\s+am\s+)?(?:back\s+on\s+)?(?:the\s+)?(?:homepage|base\s+URL|root\s+URL|start\s+page)$",
    ),
    # Enabled/disabled state, with optional row scope
    _rule(
        "verify_enabled",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+not\s+disabled|should\s+be\s+enabled)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    _rule(
        "verify_disabled",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+not\s+enabled|should\s+be\s+disabled)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    _rule(
        "verify_enabled",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:enabled|isEnabled|active|clickable|interactive)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    _rule(
        "verify_disabled",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:disabled|isDisabled|greyed out|grayed out|inactive|read-only|readonly|restricted)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    # Checked/selected state, with optional row scope
    _rule(
        "verify_not_selected",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:not\s+selected|not\s+checked|not\s+chosen|unchecked|off|should\s+not\s+be\s+selected)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    _rule(
        "verify_selected",
        _THEN_PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:selected|checked|on|chosen|active|expanded|open|should\s+be\s+selected)(?:\s+in\s+(?:the\s+)?(?:row|record)\s+(?:identifying|for|with|containing)\s+["']([^"']+)["'])?$""",
        element=1,
        row_anchor=2,
    ),
    # Text visibility
    _rule(
        "verify",
        PREFIX + r"""(?:should\s+)?see\s+["']([^"']+)["']$""",
        value=1,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:validate|verify|assert|check|ensure|I\s+see)\s+["']([^"']+)["'](?:\s+(?:text|message|label|heading|info|message/text))?\s*(?:is|are|should\s+be|should\s+be\s+transparently)?\s*(?:present|shown|displayed|visible|display|be\s+displayed|be\s+visible)$""",
        element=1,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:validate|verify|assert|check|ensure|I\s+see)\s+(?:the\s+)?(?:text|message|label|heading|title|info|content|message/text)\s+["']([^"']+)["'](?:\s+(?:is|are|should\s+be)?\s*(?:present|shown|displayed|visible|display|be\s+displayed|be\s+visible))?$""",
        element=1,
    ),
    _rule(
        "verify_not",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']([^"']+)["']\s+(?:that\s+)?(?:it\s+)?(?:is\s+)?not\s+(?:displayed|visible|present|shown)$""",
        value=1,
    ),
    _rule(
        "verify_not",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+["']([^"']+)["']\s+(?:is\s+)?not\s+(?:displayed|visible|present|shown)""",
        element=1,
        value=2,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+["']([^"']+)["']\s+(?:is\s+)?(?:displayed|visible|present)""",
        element=1,
        value=2,
    ),
    _rule(
        "verify_not",
        PREFIX + r"""(?:validate|verify|assert|check|should\s+be)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+|are\s+)?not\s+(?:displayed|visible|present)(?:\s+["']([^"']+)["'])?""",
        element=1,
        value=2,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:validate|verify|assert|check|should\s+be)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+|are\s+)?(?:displayed|visible|present|equals|contains)(?:\s+["']([^"']+)["'])?""",
        element=1,
        value=2,
    ),
    # Placeholders and field values
    _rule(
        "verify_placeholder",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']([^"']+)["']\s+(?:with|in|for)\s+(.+?)\s+(?:place\s*holder|placeholder|place holder)$""",
        element=2,
        value=1,
    ),
    _rule(
        "verify_placeholder",
        PREFIX + r"""(?:validate|verify|assert|check)\s+(.+?)\s+(?:place\s*holder|placeholder|place holder)\s+(?:value|text|is)?\s*["']([^"']+)["']$""",
        element=1,
        value=2,
    ),
    _rule(
        "verify_value",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']?([^"']+)["']?\s+(?:is\s+filled\s+in|is|appears\s+in)\s+(?:the\s+)?(.+?)(?:\s+field|\s+box|\s+input)?$""",
        element=2,
        value=1,
    ),
    _rule(
        "verify_not",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']([^"']+)["']\s+(?:message|text)?\s*(?:should\s+not\s+be|should\s+not)\s*(?:display|displayed|present|shown|visible)""",
        value=1,
    ),
    _rule(
        "verify_not",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']([^"']+)["']\s+(?:this\s+)?(?:text|message)\s+(?:should\s+)?not\s+(?:be\s+)?(?:display|displayed|present|shown|visible)""",
        value=1,
    ),
    # Fill
    _rule(
        "fill",
        _PRONOUN_PREFIX + r"""(?:enter|fill|type|input)\s+["']([^"']+)["']\s+(?:into|in|to|for)\s+(?:the\s+)?["']?([^"']+)["']?""",
        element=2,
        value=1,
    ),
    _rule(
        "fill",
        _PRONOUN_PREFIX + r"""(?:enter|fill|type|input)\s+(?:given\s+value|the\s+text|the\s+value|given\s+text|value|text)?\s*["']([^"']+)["']\s+(?:into|in|to|for)\s+(?:the\s+)?["']?([^"']+)["']?""",
        element=2,
        value=1,
    ),
    _rule(
        "fill",
        PREFIX + r"""(?:fill|enter|type|input|set|update|change)\s+(?:the\s+)?(.+?)\s+with\s+(?:given\s+value|the\s+text|the\s+value|given\s+text|value|text)?\s*["']([^"']+)["']""",
        element=1,
        value=2,
    ),
    _rule(
        "fill",
        PREFIX + r"""(?:fill|enter|type|input|write)\s+(?:the\s+)?([\w\s\-]+?)(?:[: ])?\s+["']([^"']+)["']""",
        element=1,
        value=2,
    ),
    # Menus and dropdowns
    _rule(
        "select_menu",
        PREFIX + r"""(?:select|choose|click|navigate\s+to|open)\s+["']?([^"']+)["']?\s+(?:from|in|using|via)\s+(?:the\s+)?(?:navigation\s+|sidebar\s+|top\s+)?(?:menu|navbar|nav|menu\s*bar)$""",
        value=1,
    ),
    _rule(
        "select_multi",
        PREFIX + r"""(?:select|choose)\s+["']([^"']+)["'](?:\s+and\s+["'][^"']+["'])+\s+(?:from|in|for)\s+(?:the\s+)?["']?([^"']+)["']?""",
        element=2,
        value=1,
        collect_quoted=True,
    ),
    _rule(
        "select",
        PREFIX + r"""(?:select|choose)\s+["']([^"']+)["']\s+(?:from|in|for)\s+(?:the\s+)?["']?([^"']+)["']?""",
        element=2,
        value=1,
    ),
    _rule(
        "select",
        PREFIX + r"""(?:select|choose)\s+(?:the\s+)?["']?([^"']+)["']?\s+(?:from|in|for)\s+["']([^"']+)["']""",
        element=1,
        value=2,
    ),
    _rule(
        "select",
        PREFIX + r"""(?:set|change)\s+(?:the\s+)?(?:dropdown\s+|select\s+)?["']?([^"']+)["']?\s+to\s+["']([^"']+)["']""",
        element=1,
        value=2,
    ),
    _rule(
        "multiselect_item",
        PREFIX + r"""(?:select|choose)\s+(?:multiple\s+items\s+)?["']([^"']+)["'](?:\s+from\s+(?:the\s+)?(?:list|grid))?$""",
        value=1,
    ),
    _rule(
        "verify_selected",
        PREFIX + r"""(?:validate|verify|check)\s+(?:that\s+)?(?:items?\s+)?["']([^"']+)["']\s+(?:is|are)\s+selected$""",
        value=1,
    ),
    _rule(
        "deselect",
        PREFIX + r"""(?:deselect|remove|unselect|clear)\s+["']([^"']+)["']\s+(?:from|in|for)\s+(?:the\s+)?["']?([^"']+)["']?""",
        element=2,
        value=1,
    ),
    _rule(
        "verify",
        PREFIX + r"""(?:validate|verify|assert|check)\s+["']([^"']+)["']\s+(?:this\s+)?(?:text|message|item)\s+(?:is\s+)?(?:present|shown|displayed|visible|selected)""",
        value=1,
    ),
    # Checkboxes
    _rule(
        "check",
        PREFIX + r"""(?:check|tick|mark)\s+(?:the\s+)?(?:checkbox\s+|box\s+)?["']?([^"']+)["']?""",
        element=1,
    ),
    _rule(
        "uncheck",
        PREFIX + r"""(?:uncheck|untick|unmark)\s+(?:the\s+)?(?:checkbox\s+|box\s+)?["']?([^"']+)["']?""",
        element=1,
    ),
    # Clicks, most specific first
    _rule(
        "double_click",
        PREFIX + r"""double\s+(?:click|tap)\s+(?:on\s+)?(?:the\s+)?["']?([^"']+)["']?""",
        element=1,
    ),
    _rule(
        "right_click",
        PREFIX + r"""right\s+(?:click|tap)\s+(?:on\s+)?(?:the\s+)?["']?([^"']+)["']?""",
        element=1,
    ),
    _rule(
        "click",
        PREFIX + r"""(?:click|tap|press|hit)\s+(?:on\s+)?(?:the\s+)?["']?([^"']+)["']?""",
        element=1,
    ),
    _rule("click", PREFIX + r"(?:click|press|tap)(?:\s+on)?\s+(.+?)$", element=1),
)


# =============================================================================
# Table / window / frame / alert rules (Multi-Tier Parser, first tier)
# =============================================================================

_IN_ROW_WHERE = r"""\s+in\s+(?:the\s+)?(?:row|record)\s+where\s+["']([^"']+)["']\s+is\s+["']([^"']+)["']"""
_ROW_CONDITION = r"""\s+(?:where|with|having|that\s+has)\s+["']?([^"']+?)["']?\s+(?:column\s+)?(?:value\s+)?(?:is|=|equals?)\s+["']([^"']+)["']"""

TABLE_RULES: tuple[PatternRule, ...] = (
    # URL verification
    _table(
        "verify_url",
        PREFIX + r"""(?:verify|check|assert)\s+(?:current\s+|page\s+)?url\s+(?:exactly\s+)?(?:matches|is|equals)\s+["']([^"']+)["']""",
        value=1,
    ),
    _table(
        "verify_url",
        PREFIX + r"""(?:verify|check|assert)\s+(?:current\s+|page\s+)?url\s+contains\s+["']([^"']+)["']""",
        value=1,
    ),
    # Slider / range input
    _table(
        "set_slider",
        PREFIX
        + r"(?:set|move|adjust|slide|drag|change)\s+"
        + r"(?:(?:the|a|an)\s+)?"
        + r"((?:.+?\s+)?(?:slider|range|volume|brightness|zoom|percentage|offset|pos|position|level|intensity|value|speed|rate|progress))\s*"
        + r"(?:slider)?\s*"
        + r"(?:to|at)\s+"
        + r"""["']([^"']+)["']""",
        element_name=1,
        value=2,
    ),
    # Table structure
    _table(
        "table_visible",
        PREFIX + r"""(?:the\s+)?["']?([^"']+)["']?\s+table\s+(?:is\s+)?(?:visible|displayed|present)""",
        table_name=1,
    ),
    _table(
        "table_has_column",
        PREFIX + r"""(?:the\s+)?["']?([^"']+)["']?\s+table\s+should\s+(?:have|contain)\s+column\s+["']([^"']+)["']""",
        table_name=1,
        column_name=2,
    ),
    _table(
        "table_row_count",
        PREFIX + r"""(?:the\s+)?["']?([^"']+)["']?\s+table\s+should\s+have\s+(?:at least|exactly|at most)\s+(\d+)\s+rows?""",
        table_name=1,
        row_count=2,
    ),
    # Row level
    _table(
        "row_exists",
        PREFIX + r"""a\s+row\s+should\s+exist\s+where\s+["']([^"']+)["']\s+is\s+["']([^"']+)["']""",
        column_name=1,
        value=2,
    ),
    _table(
        "row_not_exists",
        PREFIX + r"""a\s+row\s+should\s+not\s+exist\s+where\s+["']([^"']+)["']\s+is\s+["']([^"']+)["']""",
        column_name=1,
        value=2,
    ),
    _table(
        "row_added_with_value",
        PREFIX + r"""verify\s+(?:new\s+)?row\s+is\s+(?:added|created|inserted)\s+with\s+["']([^"']+)["']\s+in\s+(?:the\s+)?["']?([^"']+)["']?\s+column""",
        value=1,
        column_name=2,
    ),
    _table(
        "row_cell_validation",
        PREFIX + r"""in\s+the\s+row\s+where\s+["']([^"']+)["']\s+is\s+["']([^"']+)["'],\s+["']([^"']+)["']\s+should\s+be\s+["']([^"']+)["']""",
        condition_column=1,
        condition_value=2,
        target_column=3,
        expected_value=4,
    ),
    _table(
        "cell_value_by_position",
        PREFIX + r"""(?:the\s+)?cell\s+at\s+row\s+(\d+)\s+and\s+column\s+["']([^"']+)["']\s+should\s+be\s+["']([^"']+)["']""",
        row_number=1,
        column_name=2,
        expected_value=3,
    ),
    # Row actions
    _table(
        "click_in_row",
        PREFIX + r"""clicks?\s+["']([^"']+)["']\s+(?:in|for|on)\s+(?:the\s+)?row""" + _ROW_CONDITION,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "click_specific_in_row",
        PREFIX + r"clicks?\s+(?:on|one|the|a|an)?\s*(.+?)\s+(?:in|for|on)\s+(?:the\s+)?row" + _ROW_CONDITION,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "click_in_row_position",
        PREFIX + r"clicks?\s+(?:on|the)?\s*(.+?)\s+(?:in|at)\s+(?:the\s+)?(first|last|\d+(?:st|nd|rd|th)?|row\s+\d+)\s+row",
        element_name=1,
        row_position=2,
    ),
    _table(
        "direct_row_action",
        PREFIX + r"(edit|delete|remove|update|modify)\s+(?:the\s+)?row" + _ROW_CONDITION,
        row_action=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "select_checkbox_in_row",
        PREFIX + r"selects?\s+(?:the\s+)?checkbox\s+(?:in|for|on)\s+(?:the\s+)?row" + _ROW_CONDITION,
        condition_column=1,
        condition_value=2,
    ),
    _table(
        "get_row_values",
        PREFIX + r"""(?:get|extract|retrieve|fetch)\s+all\s+(?:column\s+)?values?\s+(?:from\s+(?:the\s+)?row\s+)?(?:where|with|having)\s+["']?([^"']+)["']?\s+(?:is|=|equals?)\s+["']([^"']+)["']""",
        condition_column=1,
        condition_value=2,
    ),
    _table(
        "verify_row_not_exists",
        PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?row\s+should\s+not\s+(?:be\s+)?(?:present|exist)\s+where\s+["']?([^"']+)["']?\s+is\s+["']([^"']+)["']""",
        condition_column=1,
        condition_value=2,
    ),
    # Row-scoped state checks
    _table(
        "verify_enabled",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+not\s+disabled|should\s+be\s+enabled)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "verify_disabled",
        PREFIX + r"(?:validate|verify|assert|check|ensure)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+not\s+enabled|should\s+be\s+disabled)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "verify_enabled",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:enabled|isEnabled|active|clickable|interactive)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "verify_disabled",
        PREFIX + r"(?:validate|verify|assert|check|ensure)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:disabled|isDisabled|greyed out|grayed out|inactive|read-only|readonly|restricted)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "verify_not_selected",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+not\s+selected|is\s+not\s+checked|is\s+not\s+chosen|is\s+unchecked|is\s+off|should\s+not\s+be\s+selected)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    _table(
        "verify_selected",
        PREFIX + r"(?:validate|verify|assert|check)\s+(?:that\s+)?(?:the\s+)?(.+?)\s+(?:is\s+)?(?:selected|checked|on|chosen|should\s+be\s+selected)" + _IN_ROW_WHERE,
        element_name=1,
        condition_column=2,
        condition_value=3,
    ),
    # Browser and windows
    _table("close_browser", PREFIX + r"(?:close|quit|exit)\s+(?:the\s+)?browser"),
    _table(
        "switch_to_new_window",
        PREFIX + r"(?:switch|navigate|go)\s+to\s+(?:the\s+)?(?:new|second|latest)\s+(?:window|tab)",
    ),
    _table(
        "switch_to_main_window",
        PREFIX + r"(?:switch|navigate|go)\s+(?:back\s+)?to\s+(?:the\s+)?(?:main|first|original|parent)\s+(?:window|tab)",
    ),
    _table("close_current_window", PREFIX + r"(?:close|shut)\s+(?:the\s+)?(?:current|this)\s+(?:window|tab)"),
    _table(
        "verify_window_count",
        PREFIX + r"(?:validate|verify|check|ensure)\s+(?:the\s+)?(?:current\s+)?(?:tab|window)\s+count\s+(?:is|equals|should\s+be)\s+(\d+)",
        value=1,
    ),
    _table(
        "verify_window_exists",
        PREFIX + r"(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?(?:original|main|first|parent)\s+tab\s+(?:still\s+)?exists",
    ),
    _table(
        "verify_window_exists",
        PREFIX + r"(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:a\s+)?(?:new|second|latest)\s+(?:window|tab)\s+(?:exists|is\s+open|opened|created|present)",
    ),
    _table("close_window", PREFIX + r"(?:close|shut)\s+(?:the\s+)?(?:second|new|latest)\s+(?:window|tab)"),
    # Alerts
    _table(
        "accept_alert",
        PREFIX + r"(?:accept|click ok on|confirm|click ok|ok)\s+(?:the\s+)?(?:alert|confirm|dialog)",
    ),
    _table(
        "accept_alert",
        PREFIX + r"""(?:accept|confirm)\s+(?:the\s+)?(?:alert|confirm)\s+(?:with\s+message|saying|that says)\s+["']([^"']+)["']""",
        value=1,
    ),
    _table(
        "accept_alert",
        PREFIX + r"""(?:verify|check|assert)\s+(?:the\s+)?(?:alert|confirm)\s+(?:says|message is|contains|shows)\s+["']([^"']+)["']""",
        value=1,
    ),
    _table(
        "accept_alert",
        PREFIX + r"""(?:verify|check)\s+(?:and\s+)?(?:accept|confirm)\s+(?:the\s+)?(?:alert|confirm)\s+(?:with|saying|shows)\s+["']([^"']+)["']""",
        value=1,
    ),
    _table(
        "dismiss_alert",
        PREFIX + r"(?:dismiss|cancel|close|click cancel|click cancel on)\s+(?:the\s+)?(?:alert|confirm|dialog|popup alert)",
    ),
    _table(
        "prompt_alert",
        PREFIX + r"""(?:enter|type|input)\s+["']([^"']+)["']\s+(?:in|into|to)\s+(?:the\s+)?prompt""",
        value=1,
    ),
    _table("prompt_alert", PREFIX + r"(?:accept|confirm|click ok on)\s+(?:the\s+)?prompt"),
    _table("prompt_alert", PREFIX + r"(?:dismiss|cancel)\s+(?:the\s+)?prompt"),
    # Frames
    _table(
        "switch_to_frame",
        PREFIX + r"""(?:switch|focus|go)\s+to\s+(?:the\s+)?(?:iframe|frame)\s+["']?([^"']+)["']?""",
        element_name=1,
    ),
    _table(
        "switch_to_main_frame",
        PREFIX + r"(?:switch|focus|go)\s+(?:back\s+)?to\s+(?:the\s+)?(?:main\s+content|top\s+frame|parent\s+frame)",
    ),
    # Modals
    _table(
        "verify_modal_visible",
        PREFIX + r"(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?modal\s+(?:dialog\s+)?(?:is\s+)?(?:visible|displayed|present)",
    ),
    _table(
        "verify_modal_visible",
        PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?modal\s+(?:dialog\s+)?with\s+(?:title|header)\s+["']([^"']+)["']\s+(?:is\s+)?(?:visible|displayed|present)""",
        value=1,
    ),
    _table(
        "verify_modal_not_visible",
        PREFIX + r"(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?modal\s+(?:dialog\s+)?(?:is\s+)?not\s+(?:visible|displayed|present)",
    ),
    _table(
        "verify_modal_not_visible",
        PREFIX + r"""(?:validate|verify|check|ensure)\s+(?:that\s+)?(?:the\s+)?modal\s+(?:dialog\s+)?with\s+(?:title|header)\s+["']([^"']+)["']\s+(?:is\s+)?not\s+(?:visible|displayed|present)""",
        value=1,
    ),
    _table("close_modal", PREFIX + r"(?:close|dismiss|exit|shut|hide)\s+(?:the\s+)?(?:modal|dialog|dialog box|popup)"),
    # Multiselect lists
    _table(
        "multiselect_item",
        PREFIX + r"""(?:select|choose|pick)\s+["']([^"']+)["']\s+(?:from|in)\s+(?:the\s+)?(list|grid)""",
        value=1,
    ),
    _table(
        "multiselect_item",
        PREFIX + r"""(?:select|choose|pick)\s+(?:multiple\s+)?(?:items?|values?)\s+["']([^"']+)["']""",
        value=1,
    ),
    _table(
        "deselect",
        PREFIX + r"""(?:remove|deselect|clear|delete)\s+["']([^"']+)["']\s+from\s+(.+?)$""",
        value=1,
        element_name=2,
    ),
    # Mouse and tooltips
    _table(
        "hover",
        PREFIX
        + r"(?:hover|mouse\s*over|move\s+mouse\s+to|point\s+to|focus\s+on|place\s+cursor\s+on)\s+(?:over\s+|to\s+)?(?:the\s+)?"
        + r"""["']?([^"']+)["']?""",
        element_name=1,
    ),
    _table(
        "verify_tooltip",
        PREFIX + r"""(?:verify|check)\s+tooltip\s+(?:of|for)\s+["']?([^"']+)["']?\s+(?:contains|is)\s+["']([^"']+)["']""",
        element_name=1,
        value=2,
    ),
    _table(
        "verify_tooltip",
        PREFIX + r"""(?:verify|check)\s+tooltip\s+["']([^"']+)["']\s+(?:appears|is displayed|is visible|shows|is shown)""",
        value=1,
    ),
    _table(
        "verify_tooltip",
        PREFIX + r"(?:verify|check)\s+tooltip\s+(?:disappears|is hidden|is not visible|hides|is not displayed)",
        value="",
    ),
    # Selection state
    _table(
        "verify_selected",
        PREFIX + r"""(?:verify|check|assert)\s+(?:that\s+)?(?:items?\s+)?["']([^"']+)["']\s+(?:is|are)\s+selected""",
        value=1,
    ),
    _table(
        "verify_selected",
        PREFIX + r"""(?:verify|check|assert)\s+(?:that\s+)?(?:items?|values?)\s+["']([^"']+)["']\s+(?:is|are)\s+selected""",
        value=1,
    ),
    _table(
        "verify_not_selected",
        PREFIX + r"""(?:verify|check|assert)\s+(?:that\s+)?(?:items?\s+)?["']([^"']+)["']\s+(?:is|are)\s+not\s+selected""",
        value=1,
    ),
)

# Multi-step shapes that still count as one supported step
COMBINED_ACTION_RULES: tuple[re.Pattern[str], ...] = (re.compile(_CLICK_AND_SWITCH, re.IGNORECASE),)

# Plan attributes a table rule may populate, and those parsed as integers
TABLE_FIELDS: frozenset[str] = frozenset({
    "element_name", "value", "table_name", "column_name", "condition_column",
    "condition_value", "target_column", "expected_value", "row_number",
    "row_count", "row_position", "row_action", "sort_order", "filter_value",
    "page_number", "bulk_action",
})
INTEGER_FIELDS: frozenset[str] = frozenset({"row_number", "row_count", "page_number"})
