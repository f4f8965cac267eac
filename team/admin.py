"""
Admin per app team.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import Category, Person
from .services import update_category_member_count


class PersonInline(admin.TabularInline):
    model = Person
    extra = 0
    fields = ["name", "value"]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "color_badge", "member_count", "created_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["member_count", "created_at", "updated_at"]
    inlines = [PersonInline]

    def color_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; padding: 2px 12px; border-radius: 3px;">&nbsp;</span>',
            obj.color,
        )

    color_badge.short_description = "Colore"

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        update_category_member_count(form.instance.pk)


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "value", "created_at"]
    list_filter = ["category"]
    search_fields = ["name", "category__name"]
    readonly_fields = ["created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        old_category_id = None
        if change:
            old_category_id = Person.objects.filter(pk=obj.pk).values_list("category_id", flat=True).first()
        super().save_model(request, obj, form, change)
        update_category_member_count(obj.category_id)
        if old_category_id and old_category_id != obj.category_id:
            update_category_member_count(old_category_id)

    def delete_model(self, request, obj):
        category_id = obj.category_id
        super().delete_model(request, obj)
        update_category_member_count(category_id)
