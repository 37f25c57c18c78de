from .document_cache import DocumentCache, TemplateIdEntry, logical_id_from_html_id, template_id_from_uri

__all__ = ["DocumentCache", "TemplateIdEntry", "logical_id_from_html_id", "template_id_from_uri"]
