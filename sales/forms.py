from django import forms

from sales.records import OrderStatus, PaymentStatus


class OrderFilterForm(forms.Form):
    status = forms.ChoiceField(required=False, choices=[("", "All statuses")] + OrderStatus.choices)
    payment_status = forms.ChoiceField(required=False, choices=[("", "All payments")] + PaymentStatus.choices)
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    page = forms.IntegerField(required=False, min_value=1)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and start > end:
            self.add_error("end_date", "End date must be on or after the start date.")
        return cleaned

    def api_filters(self, limit=20) -> dict:
        data = self.cleaned_data if self.is_valid() else {}
        return {
            "page": data.get("page") or 1,
            "limit": limit,
            "status": data.get("status"),
            "paymentStatus": data.get("payment_status"),
            "startDate": data["start_date"].isoformat() if data.get("start_date") else None,
            "endDate": data["end_date"].isoformat() if data.get("end_date") else None,
            "sortBy": "createdAt",
            "sortOrder": "DESC",
        }


class OrderStatusForm(forms.Form):
    status = forms.ChoiceField(choices=OrderStatus.choices)


class PaymentStatusForm(forms.Form):
    payment_status = forms.ChoiceField(choices=PaymentStatus.choices)


class OrderNotesForm(forms.Form):
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))


class CancelOrderForm(forms.Form):
    reason = forms.CharField(required=False, max_length=500)
