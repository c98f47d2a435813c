from django import forms

from core.services.menu_tree import parent_choices
from core.utils.url_choices import category_for_url, category_url, category_url_choices


class MenuForm(forms.Form):
    title = forms.CharField(max_length=255)
    category = forms.ChoiceField(choices=(), required=False, label="Link to Category")
    url = forms.CharField(max_length=500, required=False, label="URL (or auto-generated from category)")
    parent = forms.TypedChoiceField(choices=(), required=False, coerce=int, empty_value=None, label="Parent Menu")
    order = forms.IntegerField(initial=0, label="Order Number")

    def __init__(self, *args, menus=(), categories=(), editing=None, **kwargs):
        menus = list(menus)
        categories = list(categories)
        self.editing = editing

        # The menu itself and everything below it can't become its parent.
        choices = parent_choices(menus, exclude_id=editing.id if editing else None)

        if editing is not None and "initial" not in kwargs:
            offered = {value for value, _ in choices}
            parent = str(editing.parent_id) if editing.parent_id is not None else ""
            matched = category_for_url(categories, editing.url)
            kwargs["initial"] = {
                "title": editing.title,
                "url": editing.url or "",
                # dangling or cyclic parents show as top level
                "parent": parent if parent in offered else "",
                "order": editing.order,
                "category": matched.slug if matched else "",
            }

        super().__init__(*args, **kwargs)

        self.fields["parent"].choices = choices
        self.fields["category"].choices = category_url_choices(categories)
        self.fields["order"].help_text = "Lower numbers appear first."

    def clean_title(self):
        title = self.cleaned_data["title"].strip()
        if not title:
            raise forms.ValidationError("Title is required.")
        return title

    def clean(self):
        cleaned = super().clean()
        slug = cleaned.get("category")
        if slug:
            cleaned["url"] = category_url(slug)
        else:
            cleaned["url"] = (cleaned.get("url") or "").strip() or None
        return cleaned

    def payload(self) -> dict:
        return {
            "title": self.cleaned_data["title"],
            "url": self.cleaned_data["url"],
            "parent_id": self.cleaned_data["parent"],
            "order": self.cleaned_data["order"],
        }
