# Groovy values are interpolated into single-quoted literals; manifest
# validation keeps quotes, backslashes and control characters out of them.
from __future__ import annotations

from pathlib import PurePosixPath

from ._core_base import GENERATED_MARKER
from .views import ViewApplication, ViewPlatformAndroid

ANDROID_GRADLE_PLUGIN_VERSION = "8.0.2"


def escape_xml_pcdata(data: str) -> str:
    return data.replace("&", "&amp;").replace("<", "&lt;")


def escape_properties_value(data: str) -> str:
    return data.replace("\\", "\\\\")


def namespace_path(namespace: str) -> PurePosixPath:
    return PurePosixPath(*namespace.split("."))


def gradle_project_properties(
    application: ViewApplication,
    android: ViewPlatformAndroid,
) -> list[tuple[str, str]]:
    return [
        ("osiris.application.id", application.id),
        ("osiris.application.idSymbol", application.id_symbol),
        ("osiris.application.name", application.name),
        ("osiris.application.path", application.path),
        ("osiris.application.package", application.package),
        ("osiris.application.packageSymbol", application.package_symbol),
        ("osiris.android.namespace", android.namespace),
        ("osiris.android.applicationId", android.application_id),
        ("osiris.android.minSdk", str(android.min_sdk)),
        ("osiris.android.targetSdk", str(android.target_sdk)),
        ("osiris.android.compileSdk", str(android.compile_sdk)),
        ("osiris.android.ndkLevel", str(android.ndk_level)),
        ("osiris.android.versionCode", str(android.version_code)),
        ("osiris.android.versionName", android.version_name),
        ("osiris.android.sdkPath", android.sdk_path),
    ]


# `gradle.properties` is read by Gradle before startup. Enables AndroidX,
# sizes the build JVM and keeps `R` classes non-transitive.
def render_gradle_properties() -> str:
    lines = [
        f"# {GENERATED_MARKER}",
        "org.gradle.daemon=false",
        "org.gradle.jvmargs=-Xmx2048m -Dfile.encoding=UTF-8",
        "android.useAndroidX=true",
        "android.nonTransitiveRClass=true",
    ]
    return "\n".join(lines) + "\n"


def render_local_properties(android: ViewPlatformAndroid) -> str:
    lines = [
        f"# {GENERATED_MARKER}",
        f"sdk.dir={escape_properties_value(android.sdk_path)}",
    ]
    return "\n".join(lines) + "\n"


def render_settings_gradle(application: ViewApplication) -> str:
    lines = [
        f"// {GENERATED_MARKER}",
        "pluginManagement {",
        "    repositories {",
        "        google()",
        "        mavenCentral()",
        "        gradlePluginPortal()",
        "    }",
        "}",
        "dependencyResolutionManagement {",
        "    repositoriesMode.set(RepositoriesMode.FAIL_ON_PROJECT_REPOS)",
        "    repositories {",
        "        google()",
        "        mavenCentral()",
        "    }",
        "}",
        f"rootProject.name = '{application.id_symbol}'",
    ]
    return "\n".join(lines) + "\n"


def _property_or(key: str, default: str) -> str:
    return f"(findProperty('{key}') ?: '{default}')"


def render_build_gradle(android: ViewPlatformAndroid) -> str:
    lines = [
        f"// {GENERATED_MARKER}",
        "plugins {",
        f"    id 'com.android.application' version '{ANDROID_GRADLE_PLUGIN_VERSION}'",
        "}",
        "",
        "if (hasProperty('osiris.build.dir')) {",
        "    layout.buildDirectory = file(property('osiris.build.dir'))",
        "}",
        "",
        "android {",
        f"    compileSdk Integer.parseInt({_property_or('osiris.android.compileSdk', str(android.compile_sdk))})",
        f"    namespace {_property_or('osiris.android.namespace', android.namespace)}",
        "",
        "    defaultConfig {",
        f"        applicationId {_property_or('osiris.android.applicationId', android.application_id)}",
        f"        minSdk Integer.parseInt({_property_or('osiris.android.minSdk', str(android.min_sdk))})",
        f"        targetSdk Integer.parseInt({_property_or('osiris.android.targetSdk', str(android.target_sdk))})",
        f"        versionCode Integer.parseInt({_property_or('osiris.android.versionCode', str(android.version_code))})",
        f"        versionName {_property_or('osiris.android.versionName', android.version_name)}",
        "",
        "        testInstrumentationRunner 'androidx.test.runner.AndroidJUnitRunner'",
        "    }",
        "",
        "    buildTypes {",
        "        release {",
        "            minifyEnabled false",
        "        }",
        "    }",
        "",
        "    compileOptions {",
        "        sourceCompatibility JavaVersion.VERSION_1_8",
        "        targetCompatibility JavaVersion.VERSION_1_8",
        "    }",
        "}",
        "",
        "dependencies {",
        "    implementation 'androidx.appcompat:appcompat:1.6.1'",
        "    implementation 'com.google.android.material:material:1.9.0'",
        "    implementation 'androidx.constraintlayout:constraintlayout:2.1.4'",
        "    testImplementation 'junit:junit:4.13.2'",
        "    androidTestImplementation 'androidx.test.ext:junit:1.1.5'",
        "    androidTestImplementation 'androidx.test.espresso:espresso-core:3.5.1'",
        "}",
    ]
    return "\n".join(lines) + "\n"


def render_android_manifest() -> str:
    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f"<!-- {GENERATED_MARKER} -->",
        "<manifest",
        '    xmlns:android="http://schemas.android.com/apk/res/android"',
        '    xmlns:tools="http://schemas.android.com/tools">',
        "",
        "    <application",
        '        android:allowBackup="true"',
        '        android:label="@string/app_name"',
        '        android:supportsRtl="true"',
        '        android:theme="@style/Theme.Main">',
        "        <activity",
        '            android:name=".MainActivity"',
        '            android:exported="true">',
        "            <intent-filter>",
        '                <action android:name="android.intent.action.MAIN" />',
        '                <category android:name="android.intent.category.LAUNCHER" />',
        "            </intent-filter>",
        "        </activity>",
        "    </application>",
        "</manifest>",
    ]
    return "\n".join(lines) + "\n"


def render_activity_main_layout() -> str:
    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f"<!-- {GENERATED_MARKER} -->",
        "<androidx.constraintlayout.widget.ConstraintLayout",
        '    xmlns:android="http://schemas.android.com/apk/res/android"',
        '    xmlns:app="http://schemas.android.com/apk/res-auto"',
        '    xmlns:tools="http://schemas.android.com/tools"',
        '    android:layout_width="match_parent"',
        '    android:layout_height="match_parent"',
        '    tools:context=".MainActivity">',
        "",
        "    <TextView",
        '        android:layout_width="wrap_content"',
        '        android:layout_height="wrap_content"',
        '        android:text="@string/app_name"',
        '        app:layout_constraintBottom_toBottomOf="parent"',
        '        app:layout_constraintEnd_toEndOf="parent"',
        '        app:layout_constraintStart_toStartOf="parent"',
        '        app:layout_constraintTop_toTopOf="parent" />',
        "</androidx.constraintlayout.widget.ConstraintLayout>",
    ]
    return "\n".join(lines) + "\n"


def render_strings(application: ViewApplication) -> str:
    lines = [
        f"<!-- {GENERATED_MARKER} -->",
        "<resources>",
        f'    <string name="app_name">{escape_xml_pcdata(application.name)}</string>',
        "</resources>",
    ]
    return "\n".join(lines) + "\n"


def render_themes() -> str:
    lines = [
        f"<!-- {GENERATED_MARKER} -->",
        '<resources xmlns:tools="http://schemas.android.com/tools">',
        '    <style name="Theme.Main" parent="Theme.Material3.DayNight.NoActionBar">',
        "    </style>",
        "</resources>",
    ]
    return "\n".join(lines) + "\n"


def render_main_activity(android: ViewPlatformAndroid) -> str:
    lines = [
        f"// {GENERATED_MARKER}",
        f"package {android.namespace};",
        "",
        "import androidx.appcompat.app.AppCompatActivity;",
        "",
        "import android.os.Bundle;",
        "",
        "public class MainActivity extends AppCompatActivity {",
        "    @Override",
        "    protected void onCreate(Bundle savedInstanceState) {",
        "        super.onCreate(savedInstanceState);",
        "        setContentView(R.layout.activity_main);",
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"
