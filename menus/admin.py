from django.contrib import admin

from .models import EventMenu, Menu, MenuCategory, MenuItem, MenuSelection


class MenuCategoryInline(admin.TabularInline):
    model = MenuCategory
    extra = 0
    fields = ["order_index", "name", "recommended_count"]


class MenuItemInline(admin.TabularInline):
    model = MenuItem
    extra = 0
    fields = ["order_index", "name", "description", "image_url"]


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ["name", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name"]
    inlines = [MenuCategoryInline]


@admin.register(MenuCategory)
class MenuCategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "menu", "order_index", "recommended_count"]
    list_filter = ["menu"]
    inlines = [MenuItemInline]


@admin.register(EventMenu)
class EventMenuAdmin(admin.ModelAdmin):
    list_display = ["event", "menu", "created_at"]
    readonly_fields = ["share_token"]
    search_fields = ["event__title", "menu__name"]


@admin.register(MenuSelection)
class MenuSelectionAdmin(admin.ModelAdmin):
    list_display = ["event_menu", "item", "created_at"]
    search_fields = ["item__name", "event_menu__event__title"]
