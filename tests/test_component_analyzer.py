"""
Tests for per-component analysis and batch analysis.
"""

import os
from pathlib import Path

from ng_explorer.analyzer.batch import ComponentAnalysisItem, analyze_components
from ng_explorer.analyzer.component_analyzer import ComponentAnalyzer, finalize_summaries
from ng_explorer.analyzer.instance_matcher import InstanceRecord
from ng_explorer.analyzer.project import SourceProject
from ng_explorer.analyzer.template import (
    extract_element_selectors,
    extract_template_info,
    is_html_tag,
)


class TestComponentAnalyzer:
    def test_load_and_save_on_injected_service(self, svc_component_file: Path):
        analysis = ComponentAnalyzer().analyze(svc_component_file, "A", ["@app/svc"])

        assert analysis is not None
        assert [i.to_dict() for i in analysis.instances] == [
            {"propertyName": "svc", "typeName": "Svc", "methodsUsed": ["load", "save"]}
        ]
        assert analysis.all_methods_used == ["load", "save"]
        assert analysis.matched_module_specifiers == ["@app/svc"]
        assert analysis.imports_from_target_modules == ["Svc"]
        assert analysis.selector == "app-a"
        assert analysis.template.inline_template == "<div></div>"
        assert analysis.template.template_file_path is None

    def test_mixed_members(self, user_list_component_file: Path):
        analysis = ComponentAnalyzer().analyze(
            user_list_component_file, "UserListComponent", ["@app/api", "@app/store"]
        )

        summaries = {i.property_name: i for i in analysis.instances}
        assert list(summaries) == ["users", "cache", "audit"]
        assert summaries["users"].type_name == "UserApi"
        assert summaries["users"].methods_used == ["count", "list", "prefetch", "total"]
        assert summaries["cache"].type_name == "Cache"
        assert summaries["cache"].methods_used == ["clear"]
        assert summaries["audit"].type_name == "Audit"
        assert summaries["audit"].methods_used == ["record"]
        assert "logger" not in summaries

        assert analysis.all_methods_used == ["clear", "count", "list", "prefetch", "record", "total"]
        assert analysis.imports_from_target_modules == ["UserApi", "Audit", "Store"]
        assert analysis.template.template_file_path == os.path.join(
            os.path.dirname(os.path.abspath(user_list_component_file)), "user-list.component.html"
        )

    def test_ctor_only_parameter_appears_in_summaries(self, write_files):
        root = write_files(
            {
                "c.component.ts": """
                    import { Component } from '@angular/core';
                    import { Repo } from '@app/data';

                    @Component({ selector: 'app-c', template: '' })
                    export class C {
                      constructor(ctorOnly: Repo) {
                        ctorOnly.fetch();
                      }

                      later(ctorOnly: Repo): void {
                        ctorOnly.drop();
                      }
                    }
                """,
            }
        )
        analysis = ComponentAnalyzer().analyze(root / "c.component.ts", "C", ["@app/data"])
        assert [i.to_dict() for i in analysis.instances] == [
            {"propertyName": "ctorOnly", "typeName": "Repo", "methodsUsed": ["fetch"]}
        ]

    def test_all_methods_is_union_of_instances(self, user_list_component_file: Path):
        analysis = ComponentAnalyzer().analyze(
            user_list_component_file, "UserListComponent", ["@app/api", "@app/store"]
        )
        union = sorted({m for i in analysis.instances for m in i.methods_used})
        assert analysis.all_methods_used == union

    def test_idempotent(self, user_list_component_file: Path):
        analyzer = ComponentAnalyzer()
        first = analyzer.analyze(user_list_component_file, "UserListComponent", ["@app/api", "@app/store"])
        second = analyzer.analyze(user_list_component_file, "UserListComponent", ["@app/api", "@app/store"])
        assert first.to_dict() == second.to_dict()

    def test_picks_up_file_changes(self, svc_component_file: Path):
        project = SourceProject()
        analyzer = ComponentAnalyzer(project)
        assert analyzer.analyze(svc_component_file, "A", ["@app/svc"]).all_methods_used == ["load", "save"]

        source = svc_component_file.read_text(encoding="utf-8")
        svc_component_file.write_text(source.replace("this.svc?.save()", "this.svc.remove()"), encoding="utf-8")
        assert analyzer.analyze(svc_component_file, "A", ["@app/svc"]).all_methods_used == ["load", "remove"]

    def test_uses_the_given_empty_project(self, svc_component_file: Path):
        project = SourceProject()
        analyzer = ComponentAnalyzer(project)
        assert analyzer.project is project

        analyzer.analyze(svc_component_file, "A", ["@app/svc"])
        assert svc_component_file in project

    def test_analyze_class_reads_only_the_given_unit(self, svc_component_file: Path):
        project = SourceProject()
        unit = project.load(svc_component_file)
        svc_component_file.write_text("export class Unrelated {}\n", encoding="utf-8")

        analysis = ComponentAnalyzer(project).analyze_class(unit, unit.get_class("A"), ["@app/svc"])
        assert analysis.all_methods_used == ["load", "save"]
        assert analysis.selector == "app-a"

    def test_without_target_modules(self, svc_component_file: Path):
        analysis = ComponentAnalyzer().analyze(svc_component_file, "A")
        assert analysis.instances == []
        assert analysis.all_methods_used == []
        assert analysis.matched_module_specifiers == []
        assert analysis.template.inline_template == "<div></div>"

    def test_no_matching_imports(self, svc_component_file: Path):
        analysis = ComponentAnalyzer().analyze(svc_component_file, "A", ["@app/elsewhere"])
        assert analysis.instances == []
        assert analysis.imports_from_target_modules == []

    def test_missing_file_or_class(self, svc_component_file: Path, write_files):
        analyzer = ComponentAnalyzer()
        assert analyzer.analyze(svc_component_file.parent / "missing.ts", "A", ["@app/svc"]) is None
        assert analyzer.analyze(svc_component_file, "Nope", ["@app/svc"]) is None

        root = write_files({"plain.ts": "export class Plain {}\n"})
        assert analyzer.analyze(root / "plain.ts", "Plain", ["@app/svc"]) is None

    def test_to_dict(self, svc_component_file: Path):
        data = ComponentAnalyzer().analyze(svc_component_file, "A", ["@app/svc"]).to_dict()
        assert data["componentClassName"] == "A"
        assert data["targetModules"] == ["@app/svc"]
        assert data["allMethodsUsedOnTargetInstances"] == ["load", "save"]
        assert data["serviceInstancesFromTargetModules"][0]["propertyName"] == "svc"


def test_finalize_merges_colliding_names():
    instances = {"svc": InstanceRecord("svc", "Svc", {"b"})}
    ctor_only = {"svc": InstanceRecord("svc", "Svc", {"a"}), "other": InstanceRecord("other", "O")}
    summaries = finalize_summaries(instances, ctor_only)
    assert [(s.property_name, s.methods_used) for s in summaries] == [("svc", ["a", "b"]), ("other", [])]


class TestTemplate:
    def test_extract_element_selectors(self):
        template = """
            <div><app-item></app-item><span></span></div>
            <app-item [x]="1"></app-item>
            <DIV></DIV>
            <ng-container *ngIf="ok"><lib-chart></lib-chart></ng-container>
        """
        assert extract_element_selectors(template) == ["app-item", "ng-container", "lib-chart"]

    def test_is_html_tag(self):
        assert is_html_tag("button")
        assert is_html_tag("TABLE")
        assert not is_html_tag("app-button")

    def test_extract_template_info(self, analyze_source):
        unit = analyze_source(
            """
            @Component({ selector: 'x', templateUrl: '../views/x.html', template: '<p></p>' })
            class X {}

            @Component({ selector: 'y' })
            class Y {}

            class Z {}
            """
        )
        info = extract_template_info(unit.get_class("X"), "/project/src/x.component.ts")
        assert info.template_file_path == os.path.abspath("/project/views/x.html")
        assert info.inline_template == "<p></p>"
        assert extract_template_info(unit.get_class("Y"), "/project/y.ts").is_empty
        assert extract_template_info(unit.get_class("Z"), "/project/z.ts").is_empty


class TestBatch:
    def test_items_analyzed_independently(self, svc_component_file: Path):
        items = [
            ComponentAnalysisItem(str(svc_component_file), "A", item_id=7, target_modules=["@app/svc"]),
            ComponentAnalysisItem(str(svc_component_file), "A", item_id="no-targets"),
            ComponentAnalysisItem(str(svc_component_file), "Missing", item_id={"row": 3}),
        ]
        results = analyze_components(items)

        assert [r.item.item_id for r in results] == [7, "no-targets", {"row": 3}]
        assert results[0].found
        assert results[0].all_methods_used == ["load", "save"]
        assert results[0].matched_module_specifiers == ["@app/svc"]
        assert results[1].found
        assert results[1].all_methods_used == []
        assert results[1].inline_template == "<div></div>"
        assert not results[2].found

        data = results[0].to_dict()
        assert data["itemId"] == 7
        assert data["allMethodsUsed"] == ["load", "save"]

    def test_shares_the_given_project(self, svc_component_file: Path):
        project = SourceProject()
        analyze_components([ComponentAnalysisItem(str(svc_component_file), "A")], project)
        assert svc_component_file in project
