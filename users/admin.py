from django.contrib import admin

from .models import AdminPrincipal, Intern, PasswordResetToken


@admin.register(AdminPrincipal)
class AdminPrincipalAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'first_name', 'last_name', 'role', 'created_at')
    list_filter = ('role',)
    search_fields = ('email', 'first_name', 'last_name')
    exclude = ('password_hash',)


@admin.register(Intern)
class InternAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'email', 'matric_number', 'first_name', 'last_name', 'approval_status', 'is_disabled', 'created_at',
    )
    list_filter = ('approval_status', 'is_disabled', 'institution')
    search_fields = ('email', 'matric_number', 'first_name', 'last_name')
    # Approval goes through the API so the outcome email is sent
    readonly_fields = ('is_approved', 'approval_status', 'approved_by', 'approved_at', 'rejection_reason')
    exclude = ('password_hash', 'user_image', 'acceptance_letter')


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ('intern', 'created_at', 'expires_at', 'used')
    list_filter = ('used',)
    exclude = ('token',)
