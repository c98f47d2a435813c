from django import forms

ROLE_CHOICES = [
    ("", "All roles"),
    ("1", "Customer"),
    ("2", "Admin"),
    ("3", "Superadmin"),
]

ACTIVE_CHOICES = [
    ("", "Any status"),
    ("true", "Active"),
    ("false", "Inactive"),
]


class UserFilterForm(forms.Form):
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={"placeholder": "Name, username or email"}))
    role = forms.ChoiceField(required=False, choices=ROLE_CHOICES)
    active = forms.ChoiceField(required=False, choices=ACTIVE_CHOICES)
    page = forms.IntegerField(required=False, min_value=1)

    def api_filters(self, limit=20) -> dict:
        data = self.cleaned_data if self.is_valid() else {}
        return {
            "page": data.get("page") or 1,
            "limit": limit,
            "search": data.get("search"),
            "roleId": data.get("role"),
            "isActive": data.get("active"),
            "sortBy": "createdAt",
            "sortOrder": "DESC",
        }
