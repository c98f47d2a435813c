from django import forms


class LoginForm(forms.Form):
    email = forms.EmailField(widget=forms.EmailInput(attrs={"autofocus": True, "placeholder": "admin@example.com"}))
    password = forms.CharField(strip=False, widget=forms.PasswordInput)
