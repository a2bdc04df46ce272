"""
Activity composition services.

- registry: activity type -> collection, payload model, loader/saver
- activity_list: ordered activities of a lesson
- payload_editor: load/save of type-specific payloads
- nested_order: vocabulary items, quiz questions and choices
"""
