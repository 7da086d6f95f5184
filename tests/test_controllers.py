"""
Tests for controller name resolution and route rendering.
"""

from prepares import ControllerId, ControllerNameResolver, Route, ScopeFrame, ScopeStack, camelize
from prepares.nodes import Str, Sym


class TestCamelize:
    def test_simple_word(self):
        assert camelize("posts") == "Posts"

    def test_underscored_word(self):
        assert camelize("blog_posts") == "BlogPosts"

    def test_already_camelized_is_unchanged(self):
        assert camelize("BlogPosts") == "BlogPosts"


class TestControllerId:
    def test_qualified_name_without_namespace(self):
        assert ControllerId((), "Posts").qualified_name == "PostsController"

    def test_qualified_name_with_namespaces(self):
        assert str(ControllerId(("Admin", "Test"), "Posts")) == "Admin::Test::PostsController"

    def test_route_renders_controller_and_action(self):
        route = Route(ControllerId(("Admin",), "Posts"), "index")
        assert str(route) == "Admin::PostsController#index"

    def test_route_equality_ignores_location(self):
        controller = ControllerId((), "Posts")
        assert Route(controller, "show", "a.rb", 1) == Route(controller, "show", "b.rb", 9)

    def test_wildcard_route(self):
        route = Route(ControllerId((), "Internal"), "*")
        assert route.is_wildcard
        assert str(route) == "InternalController#*"

    def test_to_dict(self):
        data = Route(ControllerId(("Admin",), "Posts"), "index", "config/routes.rb", 3).to_dict()
        assert data["route"] == "Admin::PostsController#index"
        assert data["namespaces"] == ["Admin"]
        assert data["line_number"] == 3


class TestControllerNameResolver:
    def setup_method(self):
        self.resolver = ControllerNameResolver()
        self.scopes = ScopeStack()

    def test_one_id_per_name(self):
        ids = self.resolver.resolve(["posts", "users"], {}, self.scopes)
        assert [str(i) for i in ids] == ["PostsController", "UsersController"]

    def test_explicit_controller_replaces_name(self):
        ids = self.resolver.resolve(["posts"], {"controller": Sym("blog_posts")}, self.scopes)
        assert [str(i) for i in ids] == ["BlogPostsController"]

    def test_explicit_module_is_appended(self):
        ids = self.resolver.resolve(["discussions"], {"module": Str("admin")}, self.scopes)
        assert [str(i) for i in ids] == ["Admin::DiscussionsController"]

    def test_scope_prefix_comes_first(self):
        self.scopes.push(ScopeFrame.namespace("admin"))
        ids = self.resolver.resolve(["posts"], {"module": Str("reports")}, self.scopes)
        assert [str(i) for i in ids] == ["Admin::Reports::PostsController"]

    def test_path_in_name_becomes_namespace(self):
        controller = self.resolver.resolve_one("high_voltage/pages", self.scopes)
        assert controller == ControllerId(("HighVoltage",), "Pages")

    def test_empty_name_resolves_to_nothing(self):
        assert self.resolver.resolve_one("", self.scopes) is None

    def test_interpolated_controller_option_is_ignored(self):
        ids = self.resolver.resolve(["posts"], {"controller": Str("#{name}", interpolated=True)}, self.scopes)
        assert [str(i) for i in ids] == ["PostsController"]
