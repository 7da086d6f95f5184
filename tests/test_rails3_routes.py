"""
End-to-end tests for the Rails 3+ routing dialect.
"""

import pytest

PLURAL = ["index", "show", "new", "create", "edit", "update", "destroy"]
SINGULAR = PLURAL[1:]


def rails3(body: str) -> str:
    return "Blog::Application.routes.draw do\n" + body + "end\n"


class TestResources:
    def test_resources(self, prepare_routes):
        assert prepare_routes(rails3("  resources :posts\n")) == [f"PostsController#{a}" for a in PLURAL]

    def test_multiple_resources(self, prepare_routes):
        assert len(prepare_routes(rails3("  resources :posts, :users\n"))) == 14

    def test_explicit_controller(self, prepare_routes):
        routes = prepare_routes(rails3("  resources :posts, :controller => :blog_posts\n"))
        assert routes == [f"BlogPostsController#{a}" for a in PLURAL]

    def test_only_option(self, prepare_routes):
        routes = prepare_routes(rails3("  resources :posts, only: [:index, :show, :new, :create]\n"))
        assert routes == ["PostsController#index", "PostsController#show",
                          "PostsController#new", "PostsController#create"]

    def test_except_option(self, prepare_routes):
        routes = prepare_routes(rails3("  resources :posts, except: [:edit, :update, :destroy]\n"))
        assert routes == ["PostsController#index", "PostsController#show",
                          "PostsController#new", "PostsController#create"]

    @pytest.mark.parametrize("option", [":only => :none", ":except => :all", "only: :none"])
    def test_no_standard_actions(self, prepare_routes, option):
        assert prepare_routes(rails3(f"  resources :posts, {option}\n")) == []

    def test_resource(self, prepare_routes):
        assert prepare_routes(rails3("  resource :posts\n")) == [f"PostsController#{a}" for a in SINGULAR]

    def test_multiple_resource(self, prepare_routes):
        assert len(prepare_routes(rails3("  resource :posts, :users\n"))) == 12

    def test_resource_only_option(self, prepare_routes):
        routes = prepare_routes(rails3("  resource :posts, :only => [:show, :new, :create]\n"))
        assert routes == ["PostsController#show", "PostsController#new", "PostsController#create"]


class TestResourceBlocks:
    def test_verbs_in_resource_block(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  resources :posts, :only => [:show] do\n"
            "    get :list, :on => :collection\n"
            "    collection do\n"
            "      get :search\n"
            "      match :available\n"
            "    end\n"
            "    post :create, :on => :member\n"
            "    member do\n"
            "      put :update\n"
            "    end\n"
            "  end\n"
        ))
        assert routes == ["PostsController#show", "PostsController#create", "PostsController#update",
                          "PostsController#list", "PostsController#search", "PostsController#available"]

    def test_nested_resources(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  resources :posts do\n"
            "    resources :comments\n"
            "  end\n"
        ))
        assert len(routes) == 14

    def test_custom_route_in_nested_resources(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  resources :posts do\n"
            "    resources :comments\n"
            "    post :stop\n"
            "  end\n"
        ))
        assert routes[-1] == "PostsController#stop"

    def test_direct_route_after_resources(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  resources :posts\n"
            "  post \"sprints/stop\"\n"
        ))
        assert routes[-1] == "SprintsController#stop"


class TestFrames:
    def test_namespace(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  namespace :admin do\n"
            "    namespace :test do\n"
            "      resources :posts, :only => [:index]\n"
            "    end\n"
            "  end\n"
        ))
        assert routes == ["Admin::Test::PostsController#index"]

    def test_scope(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  scope :module => \"admin\" do\n"
            "    resources :posts, :only => [:index]\n"
            "  end\n"
            "  resources :discussions, :only => [:index], :module => \"admin\"\n"
            "  scope \"/admin\" do\n"
            "    resources :comments, :only => [:index]\n"
            "  end\n"
            "  scope \"/:username\", controller: :users do\n"
            "    get '/' => :show\n"
            "  end\n"
        ))
        assert routes == ["Admin::PostsController#index", "Admin::DiscussionsController#index",
                          "CommentsController#index", "UsersController#show"]

    def test_controller_block(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  controller :sessions do\n"
            "    get 'login' => :new\n"
            "    delete 'logout' => :destroy\n"
            "  end\n"
        ))
        assert routes == ["SessionsController#new", "SessionsController#destroy"]

    def test_concern_is_not_a_route(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  concern :commentable do\n"
            "    resources :comments\n"
            "  end\n"
            "  resources :posts, only: :index\n"
        ))
        assert routes == ["PostsController#index"]


class TestDirectRoutes:
    def test_calls_on_constants_emit_nothing(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  Sidekiq::Web.set 'sessions/secret'\n"
            "  Rails.logger.info 'posts/loaded'\n"
        ))
        assert routes == []

    def test_direct_verbs(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  get 'posts/show'\n"
            "  post '/posts' => 'posts#create'\n"
            "  put '/posts/:id' => 'posts#update'\n"
            "  delete '/post/:id' => 'posts#destroy'\n"
            "  get '/agb' => 'high_voltage/pages#show', :id => 'agb'\n"
        ))
        assert routes == ["PostsController#show", "PostsController#create", "PostsController#update",
                          "PostsController#destroy", "HighVoltage::PagesController#show"]

    def test_to_option(self, prepare_routes):
        routes = prepare_routes(rails3("  get \"/login\", to: 'sessions#new', as: :login\n"))
        assert routes == ["SessionsController#new"]

    def test_match_route(self, prepare_routes):
        routes = prepare_routes(rails3("  match '/auth/:provider/callback' => 'authentications#create'\n"))
        assert routes == ["AuthenticationsController#create"]

    def test_match_route_with_all_actions(self, prepare_routes):
        routes = prepare_routes(rails3("  match 'internal/:action/*whatever', :controller => \"internal\"\n"))
        assert routes == ["InternalController#*"]

    def test_root(self, prepare_routes):
        assert prepare_routes(rails3("  root :to => 'home#index'\n")) == ["HomeController#index"]

    def test_root_string_form(self, prepare_routes):
        assert prepare_routes(rails3("  root 'pages#home'\n")) == ["PagesController#home"]

    def test_default_route_is_skipped(self, prepare_routes):
        assert prepare_routes(rails3("  match ':controller(/:action(/:id(.:format)))'\n")) == []

    def test_redirects_are_skipped(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  match \"/stories/:name\" => redirect(\"/posts/%{name}\")\n"
            "  match \"/stories\" => redirect {|p, req| \"/posts/#{req.subdomain}\" }\n"
        ))
        assert routes == []

    def test_malformed_mapping_is_skipped(self, prepare_routes):
        routes = prepare_routes(rails3("  match ':controller/:action' => '#index', :as => :auto_complete\n"))
        assert routes == []


class TestWholeFile:
    def test_realistic_routes_file(self, prepare_routes):
        routes = prepare_routes(rails3(
            "  root to: 'home#index'\n"
            "\n"
            "  # Authentication\n"
            "  get '/login', to: 'sessions#new'\n"
            "\n"
            "  resources :posts, only: [:index, :show] do\n"
            "    resources :comments, only: :create\n"
            "    get :preview, on: :member\n"
            "  end\n"
            "\n"
            "  namespace :api do\n"
            "    namespace :v1 do\n"
            "      resource :session, only: [:create, :destroy]\n"
            "    end\n"
            "  end\n"
        ))
        assert routes == [
            "HomeController#index",
            "SessionsController#new",
            "PostsController#index",
            "PostsController#show",
            "CommentsController#create",
            "PostsController#preview",
            "Api::V1::SessionController#create",
            "Api::V1::SessionController#destroy",
        ]
