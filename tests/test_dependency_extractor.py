"""
Tests for injected dependency extraction.
"""

from ng_explorer.analyzer.dependency_extractor import ClassRef, DependencyExtractor
from ng_explorer.analyzer.project import SourceProject, normalize_path


class TestDependencyExtractor:
    def test_resolves_injected_classes(self, write_files):
        root = write_files(
            {
                "app/widget.component.ts": """
                    import { Component } from '@angular/core';
                    import { HttpClient } from '@angular/common/http';
                    import { UserService, Auth } from './services';
                    import * as Svc from './services';
                    import { Store } from './store';

                    @Component({ selector: 'app-widget', template: '' })
                    export class WidgetComponent {
                      private again: UserService;
                      private state: Store<AppState>;
                      private label: string;

                      constructor(
                        private users: UserService,
                        auth: Auth,
                        private http: HttpClient,
                        private alias: Svc.UserService,
                        private local: Helper,
                      ) {}
                    }

                    class Helper {}
                """,
                "app/services/index.ts": """
                    export * from './user.service';
                    export { AuthService as Auth } from './auth.service';
                """,
                "app/services/user.service.ts": "export class UserService {}\n",
                "app/services/auth.service.ts": "export class AuthService {}\n",
                "app/store.ts": "export class Store {}\n",
            }
        )
        project = SourceProject()
        unit = project.load(root / "app" / "widget.component.ts")
        cls = unit.get_class("WidgetComponent")

        unresolved = []
        refs = DependencyExtractor(project).extract(unit, cls, unresolved)

        services = normalize_path(root / "app" / "services")
        assert refs == [
            ClassRef(f"{services}/user.service.ts", "UserService"),
            ClassRef(f"{services}/auth.service.ts", "AuthService"),
            ClassRef(unit.file_path, "Helper"),
            ClassRef(normalize_path(root / "app" / "store.ts"), "Store"),
        ]
        assert unresolved == ["HttpClient"]

    def test_candidate_members_need_a_named_type(self, analyze_source):
        unit = analyze_source(
            """
            class A {
              count: number;
              items: Item[];
              constructor(private svc: Svc, untyped) {}
            }
            """
        )
        names = [m.name for m in DependencyExtractor(SourceProject()).candidate_members(unit.get_class("A"))]
        assert names == ["svc"]

    def test_class_ref_key(self):
        assert ClassRef("/src/a.ts", "A").key == "/src/a.ts#A"

    def test_same_class_from_several_members_is_listed_once(self, write_files):
        root = write_files(
            {
                "store.service.ts": "export class StoreService {}\n",
                "host.ts": """
                    import { StoreService } from './store.service';

                    export class Host {
                      private backup: StoreService;

                      constructor(private store: StoreService, readonly mirror: StoreService) {}
                    }
                """,
            }
        )
        project = SourceProject()
        unit = project.load(root / "host.ts")
        refs = DependencyExtractor(project).extract(unit, unit.get_class("Host"))
        assert refs == [ClassRef(normalize_path(root / "store.service.ts"), "StoreService")]
